# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for accounting services.

Report errors carry a stable `code` and an HTTP-equivalent `status_code`
so the API layer can translate them without re-deriving intent.
"""


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""


# ------------------------------------------------------------
# WRITE PATH (journal entries)
# ------------------------------------------------------------


class JournalEntryCreationError(AccountingServiceError):
    """Raised when a journal entry cannot be created."""


class UnbalancedEntryError(JournalEntryCreationError):
    """Raised when total debits differ from total credits."""


class JournalEntryStateError(AccountingServiceError):
    """Raised on an illegal lifecycle transition (e.g. posting twice)."""


# ------------------------------------------------------------
# READ PATH (reports)
# ------------------------------------------------------------


class ReportError(AccountingServiceError):
    code = "report_error"
    status_code = 400

    def as_dict(self) -> dict:
        return {"detail": str(self), "code": self.code}


class InvalidReportType(ReportError):
    code = "invalid_report_type"

    def __init__(self, report_type):
        self.report_type = report_type
        super().__init__(f"Unknown report type: {report_type!r}")


class MissingParameter(ReportError):
    code = "missing_parameter"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required parameter: {field}")

    def as_dict(self) -> dict:
        return {**super().as_dict(), "field": self.field}


class InvalidParameter(ReportError):
    code = "invalid_parameter"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid {field}: {message}")

    def as_dict(self) -> dict:
        return {**super().as_dict(), "field": self.field}


class AccountNotFound(ReportError):
    code = "account_not_found"
    status_code = 404

    def __init__(self, code: str):
        self.account_code = code
        super().__init__(f"Account not found: {code}")


class StoreUnavailable(ReportError):
    code = "store_unavailable"
    status_code = 503


class InvariantViolation(AccountingServiceError):
    """
    Advisory only: never raised by report generation.
    Reports embed `as_dict()` into their `invariant_violations` list.
    """

    code = "invariant_violation"

    def __init__(self, message: str, **details):
        self.details = details
        super().__init__(message)

    def as_dict(self) -> dict:
        return {"code": self.code, "detail": str(self), **self.details}
