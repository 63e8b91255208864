# accounting/services/report_service.py

"""
REPORT FAÇADE

Single entry point for every financial report:

    generate_report(pharmacy_id, report_type, params) -> dict

Responsibilities:
- validate report_type
- parse parameters (ISO dates, year/month) and apply defaults:
    start_date  -> 1 January of the current year
    end_date    -> today
    as_of_date  -> end_date, else today
    year/month  -> current month
- dispatch to the builder

It never reads journal lines itself. The journal store is passed
explicitly (defaults to the ORM store).
"""

from __future__ import annotations

from datetime import date

from django.utils import timezone
from django.utils.dateparse import parse_date

from accounting.services.balance_aggregator import BalanceAggregator
from accounting.services.balance_sheet_service import BalanceSheetService
from accounting.services.chart_of_accounts import ChartOfAccounts
from accounting.services.exceptions import InvalidParameter, InvalidReportType, MissingParameter
from accounting.services.general_ledger_service import GeneralLedgerService
from accounting.services.income_statement_service import IncomeStatementService
from accounting.services.journal_store import JournalStore
from accounting.services.tax_summary_service import TaxSummaryService
from accounting.services.trial_balance_service import TrialBalanceService

TRIAL_BALANCE = "trial_balance"
INCOME_STATEMENT = "income_statement"
BALANCE_SHEET = "balance_sheet"
GENERAL_LEDGER = "general_ledger"
G50 = "g50"

REPORT_TYPES = (TRIAL_BALANCE, INCOME_STATEMENT, BALANCE_SHEET, GENERAL_LEDGER, G50)


def parse_iso_date(params, field: str, default: date | None = None) -> date | None:
    raw = params.get(field)
    if raw in (None, ""):
        return default
    if isinstance(raw, date):
        return raw
    try:
        parsed = parse_date(str(raw).strip())
    except ValueError as exc:
        raise InvalidParameter(field, f"{raw!r} is not a valid date") from exc
    if parsed is None:
        raise InvalidParameter(field, f"{raw!r} is not an ISO date (YYYY-MM-DD)")
    return parsed


def param_or_default(params, field: str, default):
    """Missing or blank -> default; any other value (0 included) is kept for validation."""
    raw = params.get(field)
    return default if raw is None or raw == "" else raw


def resolve_date_range(params) -> tuple[date, date]:
    today = timezone.localdate()
    start = parse_iso_date(params, "start_date", date(today.year, 1, 1))
    end = parse_iso_date(params, "end_date", today)
    if start > end:
        raise InvalidParameter("start_date", "start_date must not be after end_date")
    return start, end


class ReportService:
    def __init__(self, store: JournalStore | None = None, chart: ChartOfAccounts | None = None):
        aggregator = BalanceAggregator(store)
        chart = chart or ChartOfAccounts()

        self.trial_balance = TrialBalanceService(aggregator, chart)
        self.income_statement = IncomeStatementService(aggregator, chart)
        self.balance_sheet = BalanceSheetService(aggregator, chart)
        self.general_ledger = GeneralLedgerService(aggregator, chart)
        self.tax_summary = TaxSummaryService()

    def generate(self, pharmacy_id, report_type, params=None) -> dict:
        params = params if params is not None else {}
        report_type = (report_type or "").strip() if isinstance(report_type, str) else report_type

        if report_type not in REPORT_TYPES:
            raise InvalidReportType(report_type)

        if report_type == G50:
            today = timezone.localdate()
            return self.tax_summary.build_g50_summary(
                pharmacy_id=pharmacy_id,
                year=param_or_default(params, "year", today.year),
                month=param_or_default(params, "month", today.month),
            )

        if report_type == BALANCE_SHEET:
            end = parse_iso_date(params, "end_date")
            as_of = parse_iso_date(params, "as_of_date", end or timezone.localdate())
            return self.balance_sheet.generate(pharmacy_id=pharmacy_id, as_of_date=as_of)

        start, end = resolve_date_range(params)

        if report_type == GENERAL_LEDGER:
            account_code = (params.get("account_code") or "").strip()
            if not account_code:
                raise MissingParameter("account_code")
            return self.general_ledger.generate(
                pharmacy_id=pharmacy_id,
                account_code=account_code,
                start_date=start,
                end_date=end,
            )

        if report_type == INCOME_STATEMENT:
            return self.income_statement.generate(
                pharmacy_id=pharmacy_id, start_date=start, end_date=end
            )

        return self.trial_balance.generate(
            pharmacy_id=pharmacy_id, start_date=start, end_date=end
        )


def generate_report(pharmacy_id, report_type, params=None, *, store: JournalStore | None = None) -> dict:
    return ReportService(store=store).generate(pharmacy_id, report_type, params)
