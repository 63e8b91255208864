# pharmacies/models/pharmacy.py

import uuid

from django.db import models
from django.db.models import Q


class Pharmacy(models.Model):
    """
    Represents a pharmacy tenant.

    Guarantees:
    - Pharmacies are stable master-data (UUID identity)
    - code is optional, but if provided it must be unique
    - Fiscal identifiers are carried for tax declarations (G50)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)

    # Optional, but if provided must be unique
    code = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Unique pharmacy code (optional). If set, must be unique.",
        db_index=True,
    )

    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True, default="")
    wilaya = models.CharField(max_length=100, blank=True, default="")

    # Fiscal identity (printed on the G50 declaration)
    nif = models.CharField(max_length=32, blank=True, default="")
    nis = models.CharField(max_length=32, blank=True, default="")
    rc = models.CharField(max_length=32, blank=True, default="")
    article_imposition = models.CharField(max_length=32, blank=True, default="")

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Pharmacy"
        verbose_name_plural = "Pharmacies"
        constraints = [
            models.UniqueConstraint(
                fields=["code"],
                condition=Q(code__isnull=False) & ~Q(code=""),
                name="uniq_pharmacy_code_when_present",
            ),
        ]

    def __str__(self):
        c = (self.code or "").strip()
        if c:
            return f"{self.name} ({c})"
        return self.name

    @property
    def full_address(self) -> str:
        return ", ".join(p for p in (self.address, self.city, self.wilaya) if p)
