# accounting/tests/helpers.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from accounting.models.account import Account
from accounting.services.journal_entry_service import create_journal_entry
from accounting.services.journal_store import PostedLine
from pharmacies.models import Pharmacy

DEBIT_NORMAL_CLASSES = {"2", "3", "5", "6"}


def make_pharmacy(name="Pharmacie El Amel", **extra) -> Pharmacy:
    return Pharmacy.objects.create(name=name, **extra)


def make_account(pharmacy, code, name=None, normal_balance=None, **extra) -> Account:
    if normal_balance is None:
        if code.startswith(("41", "4456", "46")) or code[0] in DEBIT_NORMAL_CLASSES:
            normal_balance = Account.NORMAL_DEBIT
        else:
            normal_balance = Account.NORMAL_CREDIT
    return Account.objects.create(
        pharmacy=pharmacy,
        code=code,
        name=name or f"Compte {code}",
        normal_balance=normal_balance,
        **extra,
    )


def post_entry(pharmacy, entry_date, lines, *, journal_code="OD", description="Écriture de test"):
    """
    lines: [(account_code, debit, credit), ...] -> posted JournalEntry
    """
    return create_journal_entry(
        pharmacy=pharmacy,
        journal_code=journal_code,
        entry_date=entry_date,
        description=description,
        lines=[
            {"account_code": code, "debit_amount": debit, "credit_amount": credit}
            for code, debit, credit in lines
        ],
        post=True,
    )


def posted_line(code, debit="0", credit="0", entry_date=date(2025, 1, 15), entry_number="OD-2025-00001", line_number=1, description=""):
    return PostedLine(
        account_code=code,
        debit_amount=Decimal(debit),
        credit_amount=Decimal(credit),
        entry_date=entry_date,
        entry_number=entry_number,
        line_number=line_number,
        description=description,
    )
