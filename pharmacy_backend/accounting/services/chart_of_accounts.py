# accounting/services/chart_of_accounts.py

"""
CHART OF ACCOUNTS READER (AUTHORITATIVE)

Answers two questions for a pharmacy:
- "Which accounts can carry postings?"  (active + detail, ordered by code)
- "Which account is this code?"         (hard-fail on unknown codes)

Design goals:
- read-only
- pharmacy-scoped (never mixes tenants)
- hard-fail on missing accounts: an unknown code would corrupt totals
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from django.db import DatabaseError

from accounting.models.account import Account
from accounting.services.exceptions import AccountNotFound, StoreUnavailable

logger = logging.getLogger(__name__)


class ChartOfAccounts:
    def __init__(self, account_model=Account):
        self.Account = account_model

    def _fetch(self, qs) -> list:
        try:
            return list(qs)
        except DatabaseError as exc:
            logger.exception("Chart of accounts query failed")
            raise StoreUnavailable("Chart of accounts is unavailable") from exc

    def get_detail_accounts(self, pharmacy_id) -> list:
        return self._fetch(
            self.Account.objects.filter(
                pharmacy_id=pharmacy_id,
                is_active=True,
                is_detail=True,
            ).order_by("code")
        )

    def get_account(self, pharmacy_id, code: str):
        code = (code or "").strip()
        found = self._fetch(
            self.Account.objects.filter(pharmacy_id=pharmacy_id, code=code)[:1]
        )
        if not found:
            raise AccountNotFound(code)
        return found[0]

    def accounts_by_code(self, pharmacy_id) -> dict:
        """All accounts of the pharmacy (active or not), keyed by code."""
        return {
            acc.code: acc
            for acc in self._fetch(
                self.Account.objects.filter(pharmacy_id=pharmacy_id).order_by("code")
            )
        }

    def require_codes(self, pharmacy_id, codes: Iterable[str]) -> dict:
        """
        Resolve every code or raise AccountNotFound for the first unknown one
        (sorted, so the error is reproducible).
        """
        by_code = self.accounts_by_code(pharmacy_id)
        missing = sorted(set(codes) - set(by_code))
        if missing:
            logger.error(
                "Posted lines reference unknown account codes",
                extra={"pharmacy_id": str(pharmacy_id), "codes": missing},
            )
            raise AccountNotFound(missing[0])
        return by_code


def get_detail_accounts(pharmacy_id) -> list:
    return ChartOfAccounts().get_detail_accounts(pharmacy_id)


def get_account(pharmacy_id, code: str):
    return ChartOfAccounts().get_account(pharmacy_id, code)
