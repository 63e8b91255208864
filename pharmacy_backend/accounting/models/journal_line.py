# accounting/models/journal_line.py

"""
======================================================
PATH: accounting/models/journal_line.py
======================================================
JOURNAL LINE MODEL

One debit OR credit posting to a single account.

Guarantees:
- Amounts are non-negative; exactly one side is non-zero
- account_code is denormalized from account (reports group by code)
- Lines of a posted entry are immutable (no updates, no deletes)
- Reporting uses journal_entry.entry_date as the accounting timeline
- Third-party tag (client, supplier, CNAS, CASNOS) and due_date are
  informational; they never change balances
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from accounting.models.journal import JournalEntry


class JournalLine(models.Model):
    entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    line_number = models.PositiveIntegerField()

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="journal_lines",
    )

    account_code = models.CharField(max_length=10, db_index=True)

    debit_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    credit_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    description = models.CharField(max_length=255, blank=True, default="")

    THIRD_PARTY_TYPES = (
        ("client", "Client"),
        ("supplier", "Supplier"),
        ("cnas", "CNAS"),
        ("casnos", "CASNOS"),
    )

    # Subledger tag for receivable/payable lines (411, 401, 431)
    third_party_type = models.CharField(
        max_length=20, choices=THIRD_PARTY_TYPES, blank=True, default=""
    )
    third_party_id = models.CharField(max_length=64, blank=True, default="")
    third_party_name = models.CharField(max_length=255, blank=True, default="")
    due_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Journal Line"
        verbose_name_plural = "Journal Lines"
        ordering = ["entry_id", "line_number"]
        indexes = [
            models.Index(fields=["account_code"], name="acct_line_account_code_idx"),
            models.Index(fields=["entry", "line_number"], name="acct_line_entry_number_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["entry", "line_number"],
                name="uniq_journal_line_number_per_entry",
            ),
            models.CheckConstraint(
                condition=Q(debit_amount__gte=0) & Q(credit_amount__gte=0),
                name="chk_journal_line_amounts_non_negative",
            ),
            models.CheckConstraint(
                condition=(Q(debit_amount__gt=0) & Q(credit_amount=0))
                | (Q(debit_amount=0) & Q(credit_amount__gt=0)),
                name="chk_journal_line_single_side",
            ),
        ]

    def __str__(self):
        side = "D" if self.debit_amount else "C"
        amount = self.debit_amount or self.credit_amount
        return f"{side} {amount} → {self.account_code}"

    def clean(self):
        debit = self.debit_amount or Decimal("0.00")
        credit = self.credit_amount or Decimal("0.00")

        if debit < 0 or credit < 0:
            raise ValidationError("Debit or credit cannot be negative")
        if debit > 0 and credit > 0:
            raise ValidationError("A line cannot have both debit and credit")
        if debit == 0 and credit == 0:
            raise ValidationError("A line must have either debit or credit")

        if self.account_id:
            self.account_code = self.account.code
            if self.entry_id and self.account.pharmacy_id != self.entry.pharmacy_id:
                raise ValidationError("Line account must belong to the entry's pharmacy")

    def save(self, *args, **kwargs):
        if self.entry_id and self.entry.is_posted:
            raise ValidationError("Lines of a posted journal entry are immutable")

        if self.account_id and not self.account_code:
            self.account_code = self.account.code

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.entry_id and self.entry.is_posted:
            raise ValidationError("Lines of a posted journal entry cannot be deleted")
        return super().delete(*args, **kwargs)
