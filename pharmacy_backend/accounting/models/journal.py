# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
JOURNAL ENTRY MODEL

Represents a single accounting transaction (journal header).

Guarantees:
- entry_number is unique per pharmacy (human-readable, e.g. VT-2026-00001)
- Lifecycle: draft -> posted (exactly once) | draft -> cancelled
- Immutable once posted (no updates, no deletes)
- entry_date is the accounting effective date (used by every report)
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from pharmacies.models import Pharmacy


class JournalEntry(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_POSTED = "posted"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_POSTED, "Posted"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    JOURNAL_SALES = "VT"
    JOURNAL_PURCHASES = "AC"
    JOURNAL_CASH = "CA"
    JOURNAL_BANK = "BQ"
    JOURNAL_MISC = "OD"
    JOURNAL_PAYROLL = "SA"
    JOURNAL_OPENING = "AN"

    JOURNAL_CODES = [
        (JOURNAL_SALES, "Journal des Ventes"),
        (JOURNAL_PURCHASES, "Journal des Achats"),
        (JOURNAL_CASH, "Journal de Caisse"),
        (JOURNAL_BANK, "Journal de Banque"),
        (JOURNAL_MISC, "Journal des Opérations Diverses"),
        (JOURNAL_PAYROLL, "Journal des Salaires"),
        (JOURNAL_OPENING, "Journal des À-Nouveaux"),
    ]

    pharmacy = models.ForeignKey(
        Pharmacy,
        on_delete=models.PROTECT,
        related_name="journal_entries",
    )

    entry_number = models.CharField(max_length=32)

    journal_code = models.CharField(
        max_length=2,
        choices=JOURNAL_CODES,
        default=JOURNAL_MISC,
    )

    entry_date = models.DateField(
        default=timezone.localdate,
        help_text="Accounting effective date",
    )

    description = models.TextField(help_text="Narrative description (libellé)")

    reference_type = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Source document type (pos_sale, purchase, chifa_payment, ...)",
    )
    reference_number = models.CharField(max_length=100, blank=True, default="")

    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT,
    )

    total_debit = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    total_credit = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    posted_at = models.DateTimeField(null=True, blank=True)
    is_auto_generated = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-entry_date", "-entry_number"]
        indexes = [
            models.Index(
                fields=["pharmacy", "status", "entry_date"],
                name="acct_journal_status_date_idx",
            ),
            models.Index(fields=["pharmacy", "journal_code"], name="acct_journal_code_idx"),
            models.Index(fields=["entry_number"], name="acct_journal_number_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["pharmacy", "entry_number"],
                name="uniq_journal_pharmacy_entry_number",
            ),
            models.CheckConstraint(
                condition=Q(status="posted", posted_at__isnull=False)
                | ~Q(status="posted"),
                name="chk_journal_posted_requires_posted_at",
            ),
        ]
        verbose_name = "Journal Entry"
        verbose_name_plural = "Journal Entries"

    def __str__(self):
        return f"{self.entry_number} – {self.entry_date}"

    @property
    def is_posted(self) -> bool:
        return self.status == self.STATUS_POSTED

    def clean(self):
        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError("Journal entry description is required")

        self.entry_number = (self.entry_number or "").strip()
        if not self.entry_number:
            raise ValidationError("Journal entry number is required")

    def save(self, *args, **kwargs):
        # Block edits ONLY if already posted in DB (still allows the one-time transition)
        if self.pk and type(self).objects.filter(
            pk=self.pk, status=self.STATUS_POSTED
        ).exists():
            raise ValidationError("JournalEntry records are immutable once posted")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.pk and type(self).objects.filter(
            pk=self.pk, status=self.STATUS_POSTED
        ).exists():
            raise ValidationError("Posted journal entries cannot be deleted")
        return super().delete(*args, **kwargs)
