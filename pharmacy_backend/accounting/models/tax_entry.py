# accounting/models/tax_entry.py

"""
======================================================
PATH: accounting/models/tax_entry.py
======================================================
TVA (VAT) ENTRY MODEL

Monthly VAT totals per pharmacy, one row per (period, tva_type).

Produced by the sales/purchase subsystems; read by the G50 summary.
Amounts are split by rate bucket (19%, 9%) plus the exempt (0%) base.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from pharmacies.models import Pharmacy

ZERO = Decimal("0.00")


def _money_field(**kwargs):
    return models.DecimalField(max_digits=14, decimal_places=2, default=ZERO, **kwargs)


class TaxEntry(models.Model):
    TYPE_COLLECTEE = "collectee"
    TYPE_DEDUCTIBLE = "deductible"

    TVA_TYPES = [
        (TYPE_COLLECTEE, "TVA collectée"),
        (TYPE_DEDUCTIBLE, "TVA déductible"),
    ]

    STATUS_OPEN = "open"
    STATUS_CLOSED = "closed"
    STATUS_DECLARED = "declared"

    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_CLOSED, "Closed"),
        (STATUS_DECLARED, "Declared"),
    ]

    pharmacy = models.ForeignKey(
        Pharmacy,
        on_delete=models.PROTECT,
        related_name="tax_entries",
    )

    period_year = models.PositiveSmallIntegerField()
    period_month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )

    tva_type = models.CharField(max_length=12, choices=TVA_TYPES)

    tva_19_base = _money_field()
    tva_19_amount = _money_field()
    tva_9_base = _money_field()
    tva_9_amount = _money_field()
    tva_0_base = _money_field(help_text="Exempt base")

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_OPEN)
    g50_reference = models.CharField(max_length=64, blank=True, default="")
    declared_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "TVA Entry"
        verbose_name_plural = "TVA Entries"
        ordering = ["-period_year", "-period_month", "tva_type"]
        constraints = [
            models.UniqueConstraint(
                fields=["pharmacy", "period_year", "period_month", "tva_type"],
                name="uniq_tva_entry_pharmacy_period_type",
            ),
        ]

    def __str__(self):
        return f"TVA {self.tva_type} {self.period_year}-{self.period_month:02d}"

    @property
    def total_base(self) -> Decimal:
        return self.tva_19_base + self.tva_9_base + self.tva_0_base

    @property
    def total_tva(self) -> Decimal:
        return self.tva_19_amount + self.tva_9_amount

    def clean(self):
        for name in (
            "tva_19_base",
            "tva_19_amount",
            "tva_9_base",
            "tva_9_amount",
            "tva_0_base",
        ):
            if (getattr(self, name) or ZERO) < 0:
                raise ValidationError({name: "TVA amounts cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
