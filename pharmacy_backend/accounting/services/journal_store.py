# accounting/services/journal_store.py

"""
JOURNAL STORE ADAPTER

The ONLY read path from reporting into persisted journal lines.

Contract:
    query_posted_lines(pharmacy_id, account_code_prefix=None,
                       date_from=None, date_to=None) -> list[PostedLine]
    query_account_totals(pharmacy_id, account_code_prefix=None,
                         date_from=None, date_to=None) -> dict[code, AccountTotals]

RULES:
- READ-ONLY: reporting never writes through this adapter
- Only POSTED entries are visible
- Date bounds are inclusive on both ends (entry_date)
- Lines are ordered by (entry_date, entry_number, line_number): a total order
- Totals keep debit and credit apart (never netted)
- Store failures surface as StoreUnavailable (never an empty result)
- No retries here; retry policy belongs to the caller
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.db import DatabaseError
from django.db.models import Sum
from django.db.models.functions import Coalesce

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.services.exceptions import StoreUnavailable
from accounting.services.money import ZERO, q2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostedLine:
    account_code: str
    debit_amount: Decimal
    credit_amount: Decimal
    entry_date: date
    entry_number: str
    line_number: int = 1
    description: str = ""

    @property
    def sort_key(self):
        return (self.entry_date, self.entry_number, self.line_number)


@dataclass(frozen=True)
class AccountTotals:
    debit: Decimal = ZERO
    credit: Decimal = ZERO

    def __add__(self, other: "AccountTotals") -> "AccountTotals":
        return AccountTotals(
            debit=q2(self.debit + other.debit),
            credit=q2(self.credit + other.credit),
        )

    @property
    def is_zero(self) -> bool:
        return self.debit == ZERO and self.credit == ZERO


EMPTY = AccountTotals()


def aggregate(lines: Iterable[PostedLine]) -> dict[str, AccountTotals]:
    debits: dict[str, Decimal] = {}
    credits: dict[str, Decimal] = {}

    for line in lines:
        code = line.account_code
        debits[code] = debits.get(code, ZERO) + (line.debit_amount or ZERO)
        credits[code] = credits.get(code, ZERO) + (line.credit_amount or ZERO)

    return {
        code: AccountTotals(debit=q2(debits[code]), credit=q2(credits[code]))
        for code in debits
    }


class JournalStore:
    """Interface. Implementations must honor the module contract."""

    def query_posted_lines(
        self,
        pharmacy_id,
        *,
        account_code_prefix: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[PostedLine]:
        raise NotImplementedError

    def query_account_totals(
        self,
        pharmacy_id,
        *,
        account_code_prefix: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> dict[str, AccountTotals]:
        return aggregate(
            self.query_posted_lines(
                pharmacy_id,
                account_code_prefix=account_code_prefix,
                date_from=date_from,
                date_to=date_to,
            )
        )


class OrmJournalStore(JournalStore):
    """Journal store backed by the Django ORM."""

    def __init__(self, line_model=JournalLine):
        self.Line = line_model

    def _posted(self, pharmacy_id, account_code_prefix, date_from, date_to):
        qs = self.Line.objects.filter(
            entry__pharmacy_id=pharmacy_id,
            entry__status=JournalEntry.STATUS_POSTED,
        )

        if account_code_prefix:
            qs = qs.filter(account_code__startswith=account_code_prefix)
        if date_from is not None:
            qs = qs.filter(entry__entry_date__gte=date_from)
        if date_to is not None:
            qs = qs.filter(entry__entry_date__lte=date_to)
        return qs

    def _fetch(self, qs, pharmacy_id) -> list:
        try:
            return list(qs)
        except DatabaseError as exc:
            logger.exception(
                "Journal store query failed",
                extra={"pharmacy_id": str(pharmacy_id)},
            )
            raise StoreUnavailable("Journal store is unavailable") from exc

    def query_posted_lines(
        self,
        pharmacy_id,
        *,
        account_code_prefix=None,
        date_from=None,
        date_to=None,
    ):
        qs = self._posted(
            pharmacy_id, account_code_prefix, date_from, date_to
        ).order_by(
            "entry__entry_date", "entry__entry_number", "line_number"
        ).values_list(
            "account_code",
            "debit_amount",
            "credit_amount",
            "entry__entry_date",
            "entry__entry_number",
            "line_number",
            "description",
            "entry__description",
        )

        return [
            PostedLine(
                account_code=code,
                debit_amount=q2(debit),
                credit_amount=q2(credit),
                entry_date=entry_date,
                entry_number=entry_number,
                line_number=line_number,
                description=line_description or entry_description or "",
            )
            for (
                code,
                debit,
                credit,
                entry_date,
                entry_number,
                line_number,
                line_description,
                entry_description,
            ) in self._fetch(qs, pharmacy_id)
        ]

    def query_account_totals(
        self,
        pharmacy_id,
        *,
        account_code_prefix=None,
        date_from=None,
        date_to=None,
    ):
        rows = (
            self._posted(pharmacy_id, account_code_prefix, date_from, date_to)
            .order_by("account_code")
            .values("account_code")
            .annotate(
                debit=Coalesce(Sum("debit_amount"), Decimal("0.00")),
                credit=Coalesce(Sum("credit_amount"), Decimal("0.00")),
            )
        )

        return {
            row["account_code"]: AccountTotals(debit=q2(row["debit"]), credit=q2(row["credit"]))
            for row in self._fetch(rows, pharmacy_id)
        }


class InMemoryJournalStore(JournalStore):
    """
    In-memory store for unit tests and offline computations.
    Lines are assumed to be posted already. Totals come from the
    base-class aggregate().
    """

    def __init__(self, lines_by_pharmacy: dict | None = None):
        self._lines = defaultdict(list)
        for pharmacy_id, lines in (lines_by_pharmacy or {}).items():
            self._lines[pharmacy_id].extend(lines)

    def add(self, pharmacy_id, *lines: PostedLine) -> None:
        self._lines[pharmacy_id].extend(lines)

    def query_posted_lines(
        self,
        pharmacy_id,
        *,
        account_code_prefix=None,
        date_from=None,
        date_to=None,
    ):
        selected = [
            line
            for line in self._lines.get(pharmacy_id, [])
            if (not account_code_prefix or line.account_code.startswith(account_code_prefix))
            and (date_from is None or line.entry_date >= date_from)
            and (date_to is None or line.entry_date <= date_to)
        ]
        return sorted(selected, key=lambda line: line.sort_key)
