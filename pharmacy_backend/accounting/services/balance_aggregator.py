# accounting/services/balance_aggregator.py

"""
BALANCE AGGREGATOR (AUTHORITATIVE)

Read-only ledger arithmetic shared by every statement builder.

RULES:
- Debits and credits are summed independently, NEVER netted here
- Partitions (entry_date):
    opening  : entry_date <  before
    period   : start <= entry_date <= end   (inclusive both ends)
    closing  : entry_date <= as_of          (unbounded below)
- Partition totals are summed by the store (SQL for the ORM store)
- signed_total() is the ONLY place the normal-balance sign rule lives
- Exact Decimal arithmetic; zero balances are valid results
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from accounting.models.account import Account
from accounting.services.journal_store import (
    EMPTY,
    AccountTotals,
    JournalStore,
    OrmJournalStore,
    PostedLine,
    aggregate,
)
from accounting.services.money import q2

__all__ = [
    "EMPTY",
    "AccountTotals",
    "BalanceAggregator",
    "aggregate",
    "signed_total",
]


def signed_total(totals: AccountTotals, normal_balance: str) -> Decimal:
    """
    Balance rule:
    - debit-normal  → debits - credits
    - credit-normal → credits - debits
    """
    if normal_balance == Account.NORMAL_DEBIT:
        return q2(totals.debit - totals.credit)
    if normal_balance == Account.NORMAL_CREDIT:
        return q2(totals.credit - totals.debit)
    raise ValueError(f"Unknown normal balance: {normal_balance!r}")


class BalanceAggregator:
    def __init__(self, store: JournalStore | None = None):
        self.store = store or OrmJournalStore()

    def posted_lines(
        self,
        pharmacy_id,
        *,
        account_prefix: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[PostedLine]:
        return self.store.query_posted_lines(
            pharmacy_id,
            account_code_prefix=account_prefix,
            date_from=date_from,
            date_to=date_to,
        )

    def _totals(self, pharmacy_id, *, account_prefix, date_from=None, date_to=None):
        return self.store.query_account_totals(
            pharmacy_id,
            account_code_prefix=account_prefix,
            date_from=date_from,
            date_to=date_to,
        )

    def opening_balances(
        self, pharmacy_id, *, before: date, account_prefix: str | None = None
    ) -> dict[str, AccountTotals]:
        if before <= date.min:
            return {}
        return self._totals(
            pharmacy_id,
            account_prefix=account_prefix,
            date_to=before - timedelta(days=1),
        )

    def period_movements(
        self,
        pharmacy_id,
        *,
        start: date,
        end: date,
        account_prefix: str | None = None,
    ) -> dict[str, AccountTotals]:
        return self._totals(
            pharmacy_id,
            account_prefix=account_prefix,
            date_from=start,
            date_to=end,
        )

    def closing_balances(
        self, pharmacy_id, *, as_of: date, account_prefix: str | None = None
    ) -> dict[str, AccountTotals]:
        return self._totals(pharmacy_id, account_prefix=account_prefix, date_to=as_of)
