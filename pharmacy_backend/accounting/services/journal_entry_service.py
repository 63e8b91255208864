# accounting/services/journal_entry_service.py

"""
======================================================
PATH: accounting/services/journal_entry_service.py
======================================================
JOURNAL ENTRY SERVICE (ACCOUNTING ENGINE, WRITE PATH)

This module is the ONLY place allowed to:
- Create JournalEntry / JournalLine rows
- Allocate entry numbers ("VT-2026-00001")
- Enforce debit == credit
- Move an entry through its lifecycle (draft -> posted | cancelled)

RULES:
- Every line hits an ACTIVE DETAIL account of the SAME pharmacy
- Each line is one-sided, >= 0.01
- Balance is checked at creation AND again at posting (over persisted lines)
- Number allocation is serialized per pharmacy (row lock on the pharmacy)
- Posted entries are immutable (enforced again by the models)
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.services.exceptions import (
    JournalEntryCreationError,
    JournalEntryStateError,
    UnbalancedEntryError,
)
from accounting.services.money import ZERO, q2
from pharmacies.models import Pharmacy

logger = logging.getLogger(__name__)

MIN_LINE_AMOUNT = Decimal("0.01")
JOURNAL_CODES = {code for code, _ in JournalEntry.JOURNAL_CODES}
THIRD_PARTY_TYPES = {code for code, _ in JournalLine.THIRD_PARTY_TYPES}


def _money(value) -> Decimal:
    try:
        return q2(value)
    except ValueError as exc:
        raise JournalEntryCreationError(str(exc)) from exc


def _sequence_width() -> int:
    return int(getattr(settings, "ACCOUNTING_ENTRY_NUMBER_WIDTH", 5))


def next_entry_number(pharmacy, journal_code: str, year: int) -> str:
    """
    Next number for (pharmacy, journal_code, year).

    Must run inside the transaction holding the pharmacy row lock.
    """
    prefix = f"{journal_code}-{year}-"
    last = (
        JournalEntry.objects.filter(pharmacy=pharmacy, entry_number__startswith=prefix)
        .order_by("-entry_number")
        .values_list("entry_number", flat=True)
        .first()
    )

    seq = 1
    if last:
        try:
            seq = int(last[len(prefix):]) + 1
        except ValueError as exc:
            raise JournalEntryCreationError(f"Malformed entry number: {last}") from exc

    return f"{prefix}{seq:0{_sequence_width()}d}"


def _normalize_lines(pharmacy, lines: list) -> list[dict]:
    if not lines or len(lines) < 2:
        raise JournalEntryCreationError("Journal entry must contain at least two lines")

    codes = set()
    for line in lines:
        if not isinstance(line, dict):
            raise JournalEntryCreationError("Each line must be an object/dict")
        account = line.get("account")
        code = account.code if isinstance(account, Account) else (line.get("account_code") or "")
        code = str(code).strip()
        if not code:
            raise JournalEntryCreationError("Line missing account_code")
        codes.add(code)

    accounts = {
        acc.code: acc
        for acc in Account.objects.filter(pharmacy=pharmacy, code__in=codes)
    }

    normalized = []
    for idx, line in enumerate(lines, start=1):
        account = line.get("account")
        code = account.code if isinstance(account, Account) else str(line.get("account_code")).strip()

        acc = accounts.get(code)
        if acc is None:
            raise JournalEntryCreationError(f"Account {code} does not exist for this pharmacy")
        if not acc.is_active:
            raise JournalEntryCreationError(f"Account {code} is inactive")
        if not acc.is_detail:
            raise JournalEntryCreationError(f"Account {code} is not a detail account")

        debit = _money(line.get("debit_amount", line.get("debit")))
        credit = _money(line.get("credit_amount", line.get("credit")))

        if debit < 0 or credit < 0:
            raise JournalEntryCreationError("Debit or credit cannot be negative")
        if debit > 0 and credit > 0:
            raise JournalEntryCreationError(f"Line {idx}: cannot have both debit and credit")
        if debit == 0 and credit == 0:
            raise JournalEntryCreationError(f"Line {idx}: must have either debit or credit")
        if max(debit, credit) < MIN_LINE_AMOUNT:
            raise JournalEntryCreationError(f"Line {idx}: amount too small")

        third_party_type = line.get("third_party_type") or ""
        if third_party_type and third_party_type not in THIRD_PARTY_TYPES:
            raise JournalEntryCreationError(
                f"Line {idx}: unknown third_party_type {third_party_type!r}"
            )

        normalized.append(
            {
                "line_number": idx,
                "account": acc,
                "debit": debit,
                "credit": credit,
                "description": (line.get("description") or "").strip(),
                "third_party_type": third_party_type,
                "third_party_id": str(line.get("third_party_id") or "").strip(),
                "third_party_name": (line.get("third_party_name") or "").strip(),
                "due_date": line.get("due_date"),
            }
        )

    return normalized


def _check_balance(total_debit: Decimal, total_credit: Decimal) -> None:
    if q2(total_debit) != q2(total_credit):
        raise UnbalancedEntryError(
            f"Journal entry not balanced: debits={q2(total_debit)} credits={q2(total_credit)}"
        )


@transaction.atomic
def create_journal_entry(
    *,
    pharmacy,
    journal_code: str,
    description: str,
    lines: list,
    entry_date: date | None = None,
    reference_type: str | None = None,
    reference_number: str | None = None,
    is_auto_generated: bool = False,
    post: bool = False,
) -> JournalEntry:
    journal_code = (journal_code or "").strip().upper()
    if journal_code not in JOURNAL_CODES:
        raise JournalEntryCreationError(f"Unknown journal code: {journal_code!r}")

    description = (description or "").strip()
    if not description:
        raise JournalEntryCreationError("Journal entry description is required")

    entry_date = entry_date or timezone.localdate()

    # serializes number allocation per pharmacy
    pharmacy = Pharmacy.objects.select_for_update().get(pk=pharmacy.pk)

    normalized = _normalize_lines(pharmacy, lines)
    total_debit = q2(sum((line["debit"] for line in normalized), ZERO))
    total_credit = q2(sum((line["credit"] for line in normalized), ZERO))
    _check_balance(total_debit, total_credit)

    try:
        entry = JournalEntry.objects.create(
            pharmacy=pharmacy,
            entry_number=next_entry_number(pharmacy, journal_code, entry_date.year),
            journal_code=journal_code,
            entry_date=entry_date,
            description=description,
            reference_type=(reference_type or "").strip(),
            reference_number=(reference_number or "").strip(),
            total_debit=total_debit,
            total_credit=total_credit,
            is_auto_generated=is_auto_generated,
        )
    except IntegrityError as exc:
        raise JournalEntryCreationError(f"Failed to create journal entry: {exc}") from exc

    JournalLine.objects.bulk_create(
        [
            JournalLine(
                entry=entry,
                line_number=line["line_number"],
                account=line["account"],
                account_code=line["account"].code,
                debit_amount=line["debit"],
                credit_amount=line["credit"],
                description=line["description"],
                third_party_type=line["third_party_type"],
                third_party_id=line["third_party_id"],
                third_party_name=line["third_party_name"],
                due_date=line["due_date"],
            )
            for line in normalized
        ]
    )

    logger.info(
        "Journal entry created",
        extra={
            "pharmacy_id": str(pharmacy.pk),
            "entry_number": entry.entry_number,
            "total": str(total_debit),
        },
    )

    if post:
        entry = post_journal_entry(entry)
    return entry


@transaction.atomic
def post_journal_entry(entry: JournalEntry) -> JournalEntry:
    locked = JournalEntry.objects.select_for_update().get(pk=entry.pk)

    if locked.status != JournalEntry.STATUS_DRAFT:
        raise JournalEntryStateError(
            f"Can only post draft entries ({locked.entry_number} is {locked.status})"
        )

    lines = list(locked.lines.all())
    if len(lines) < 2:
        raise JournalEntryStateError("Cannot post an entry with fewer than two lines")

    total_debit = q2(sum((line.debit_amount for line in lines), ZERO))
    total_credit = q2(sum((line.credit_amount for line in lines), ZERO))
    _check_balance(total_debit, total_credit)

    locked.status = JournalEntry.STATUS_POSTED
    locked.posted_at = timezone.now()
    locked.total_debit = total_debit
    locked.total_credit = total_credit
    locked.save()

    logger.info(
        "Journal entry posted",
        extra={"pharmacy_id": str(locked.pharmacy_id), "entry_number": locked.entry_number},
    )
    return locked


@transaction.atomic
def cancel_journal_entry(entry: JournalEntry) -> JournalEntry:
    locked = JournalEntry.objects.select_for_update().get(pk=entry.pk)

    if locked.status != JournalEntry.STATUS_DRAFT:
        raise JournalEntryStateError(
            f"Can only cancel draft entries ({locked.entry_number} is {locked.status})"
        )

    locked.status = JournalEntry.STATUS_CANCELLED
    locked.save()

    logger.info(
        "Journal entry cancelled",
        extra={"pharmacy_id": str(locked.pharmacy_id), "entry_number": locked.entry_number},
    )
    return locked
