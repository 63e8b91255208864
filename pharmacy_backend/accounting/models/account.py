# accounting/models/account.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from pharmacies.models import Pharmacy


class Account(models.Model):
    """
    Represents a single account within a pharmacy's Chart of Accounts (SCF).

    Guarantees:
    - Account codes are unique per pharmacy
    - Code + name are normalized (trimmed)
    - account_class matches the first digit of the code
    - statement_bucket is resolved ONCE at setup time (longest-prefix match)
      so reports never re-derive classification from prefixes
    - code and normal_balance are immutable once journal lines reference
      the account; a code change re-resolves class and bucket
    """

    NORMAL_DEBIT = "debit"
    NORMAL_CREDIT = "credit"

    NORMAL_BALANCES = [
        (NORMAL_DEBIT, "Debit"),
        (NORMAL_CREDIT, "Credit"),
    ]

    ACCOUNT_CLASSES = [
        (1, "Capitaux"),
        (2, "Immobilisations"),
        (3, "Stocks"),
        (4, "Tiers"),
        (5, "Financiers"),
        (6, "Charges"),
        (7, "Produits"),
    ]

    pharmacy = models.ForeignKey(
        Pharmacy,
        on_delete=models.PROTECT,
        related_name="accounts",
    )

    code = models.CharField(max_length=10)
    name = models.CharField(max_length=150)

    # blank=True: derived from the first digit of code when omitted
    account_class = models.PositiveSmallIntegerField(choices=ACCOUNT_CLASSES, blank=True)

    normal_balance = models.CharField(
        max_length=6,
        choices=NORMAL_BALANCES,
    )

    parent_code = models.CharField(max_length=10, blank=True, default="")

    is_detail = models.BooleanField(
        default=True,
        help_text="Only detail (leaf) accounts accept postings.",
    )
    is_active = models.BooleanField(default=True)

    statement_bucket = models.CharField(
        max_length=32,
        blank=True,
        default="",
        help_text="Reporting bucket resolved from the code at setup time.",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["pharmacy", "code"], name="acct_account_pharmacy_code_idx"),
            models.Index(
                fields=["pharmacy", "is_detail", "is_active"],
                name="acct_account_detail_active_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["pharmacy", "code"],
                name="uniq_account_pharmacy_code",
            ),
            models.CheckConstraint(
                condition=~Q(code=""),
                name="chk_account_code_not_blank",
            ),
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_account_name_not_blank",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    def clean(self):
        from accounting.services.statement_buckets import resolve_statement_bucket

        self.code = (self.code or "").strip()
        self.name = (self.name or "").strip()

        if not self.code:
            raise ValidationError("Account code is required")
        if not self.name:
            raise ValidationError("Account name is required")
        if not self.code.isdigit():
            raise ValidationError({"code": "Account code must be numeric (SCF)"})

        previous = None
        if self.pk:
            previous = (
                type(self).objects.filter(pk=self.pk)
                .values("code", "normal_balance")
                .first()
            )

        code_changed = previous is not None and previous["code"] != self.code
        has_postings = previous is not None and self.journal_lines.exists()

        if code_changed and has_postings:
            raise ValidationError({"code": "code cannot change once postings exist"})
        if (
            has_postings
            and previous["normal_balance"] != self.normal_balance
        ):
            raise ValidationError(
                {"normal_balance": "normal_balance cannot change once postings exist"}
            )

        if code_changed:
            self.account_class = None
            self.statement_bucket = ""

        if self.account_class is None:
            self.account_class = int(self.code[0])
        elif int(self.code[0]) != int(self.account_class):
            raise ValidationError(
                {"account_class": "account_class must match the first digit of the code"}
            )

        if not 1 <= int(self.account_class) <= 7:
            raise ValidationError({"account_class": "account_class must be between 1 and 7"})

        if not self.statement_bucket:
            self.statement_bucket = resolve_statement_bucket(self.code)

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
