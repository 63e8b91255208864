"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Account, JournalEntry, JournalLine, TaxEntry

Purpose:
- Pharmacy-scoped chart of accounts (SCF classes 1-7)
- Journal entries with draft/posted/cancelled lifecycle
- Single-sided journal lines (debit XOR credit)
- Monthly TVA totals consumed by the G50 summary
"""

from __future__ import annotations

from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("pharmacies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("code", models.CharField(max_length=10)),
                ("name", models.CharField(max_length=150)),
                (
                    "account_class",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        choices=[
                            (1, "Capitaux"),
                            (2, "Immobilisations"),
                            (3, "Stocks"),
                            (4, "Tiers"),
                            (5, "Financiers"),
                            (6, "Charges"),
                            (7, "Produits"),
                        ],
                    ),
                ),
                (
                    "normal_balance",
                    models.CharField(
                        choices=[("debit", "Debit"), ("credit", "Credit")],
                        max_length=6,
                    ),
                ),
                ("parent_code", models.CharField(blank=True, default="", max_length=10)),
                (
                    "is_detail",
                    models.BooleanField(
                        default=True,
                        help_text="Only detail (leaf) accounts accept postings.",
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                (
                    "statement_bucket",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Reporting bucket resolved from the code at setup time.",
                        max_length=32,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "pharmacy",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="accounts",
                        to="pharmacies.pharmacy",
                    ),
                ),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["code"],
                "indexes": [
                    models.Index(
                        fields=["pharmacy", "code"],
                        name="acct_account_pharmacy_code_idx",
                    ),
                    models.Index(
                        fields=["pharmacy", "is_detail", "is_active"],
                        name="acct_account_detail_active_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("pharmacy", "code"),
                        name="uniq_account_pharmacy_code",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("code", ""), _negated=True),
                        name="chk_account_code_not_blank",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("name", ""), _negated=True),
                        name="chk_account_name_not_blank",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("entry_number", models.CharField(max_length=32)),
                (
                    "journal_code",
                    models.CharField(
                        choices=[
                            ("VT", "Journal des Ventes"),
                            ("AC", "Journal des Achats"),
                            ("CA", "Journal de Caisse"),
                            ("BQ", "Journal de Banque"),
                            ("OD", "Journal des Opérations Diverses"),
                            ("SA", "Journal des Salaires"),
                            ("AN", "Journal des À-Nouveaux"),
                        ],
                        default="OD",
                        max_length=2,
                    ),
                ),
                (
                    "entry_date",
                    models.DateField(
                        default=django.utils.timezone.localdate,
                        help_text="Accounting effective date",
                    ),
                ),
                (
                    "description",
                    models.TextField(help_text="Narrative description (libellé)"),
                ),
                (
                    "reference_type",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Source document type (pos_sale, purchase, chifa_payment, ...)",
                        max_length=50,
                    ),
                ),
                (
                    "reference_number",
                    models.CharField(blank=True, default="", max_length=100),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("posted", "Posted"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="draft",
                        max_length=10,
                    ),
                ),
                (
                    "total_debit",
                    models.DecimalField(decimal_places=2, default=0, max_digits=14),
                ),
                (
                    "total_credit",
                    models.DecimalField(decimal_places=2, default=0, max_digits=14),
                ),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("is_auto_generated", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "pharmacy",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journal_entries",
                        to="pharmacies.pharmacy",
                    ),
                ),
            ],
            options={
                "verbose_name": "Journal Entry",
                "verbose_name_plural": "Journal Entries",
                "ordering": ["-entry_date", "-entry_number"],
                "indexes": [
                    models.Index(
                        fields=["pharmacy", "status", "entry_date"],
                        name="acct_journal_status_date_idx",
                    ),
                    models.Index(
                        fields=["pharmacy", "journal_code"],
                        name="acct_journal_code_idx",
                    ),
                    models.Index(
                        fields=["entry_number"],
                        name="acct_journal_number_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("pharmacy", "entry_number"),
                        name="uniq_journal_pharmacy_entry_number",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("posted_at__isnull", False), ("status", "posted")),
                            models.Q(("status", "posted"), _negated=True),
                            _connector="OR",
                        ),
                        name="chk_journal_posted_requires_posted_at",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("line_number", models.PositiveIntegerField()),
                ("account_code", models.CharField(db_index=True, max_length=10)),
                (
                    "debit_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=14,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00"))
                        ],
                    ),
                ),
                (
                    "credit_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=14,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00"))
                        ],
                    ),
                ),
                (
                    "description",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                (
                    "third_party_type",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("client", "Client"),
                            ("supplier", "Supplier"),
                            ("cnas", "CNAS"),
                            ("casnos", "CASNOS"),
                        ],
                        default="",
                        max_length=20,
                    ),
                ),
                ("third_party_id", models.CharField(blank=True, default="", max_length=64)),
                (
                    "third_party_name",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                ("due_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journal_lines",
                        to="accounting.account",
                    ),
                ),
                (
                    "entry",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "verbose_name": "Journal Line",
                "verbose_name_plural": "Journal Lines",
                "ordering": ["entry_id", "line_number"],
                "indexes": [
                    models.Index(
                        fields=["account_code"],
                        name="acct_line_account_code_idx",
                    ),
                    models.Index(
                        fields=["entry", "line_number"],
                        name="acct_line_entry_number_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("entry", "line_number"),
                        name="uniq_journal_line_number_per_entry",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("debit_amount__gte", 0), ("credit_amount__gte", 0)
                        ),
                        name="chk_journal_line_amounts_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("debit_amount__gt", 0), ("credit_amount", 0)),
                            models.Q(("debit_amount", 0), ("credit_amount__gt", 0)),
                            _connector="OR",
                        ),
                        name="chk_journal_line_single_side",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="TaxEntry",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("period_year", models.PositiveSmallIntegerField()),
                (
                    "period_month",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(12),
                        ]
                    ),
                ),
                (
                    "tva_type",
                    models.CharField(
                        choices=[
                            ("collectee", "TVA collectée"),
                            ("deductible", "TVA déductible"),
                        ],
                        max_length=12,
                    ),
                ),
                (
                    "tva_19_base",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                (
                    "tva_19_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                (
                    "tva_9_base",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                (
                    "tva_9_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                (
                    "tva_0_base",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Exempt base",
                        max_digits=14,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("open", "Open"),
                            ("closed", "Closed"),
                            ("declared", "Declared"),
                        ],
                        default="open",
                        max_length=10,
                    ),
                ),
                (
                    "g50_reference",
                    models.CharField(blank=True, default="", max_length=64),
                ),
                ("declared_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "pharmacy",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tax_entries",
                        to="pharmacies.pharmacy",
                    ),
                ),
            ],
            options={
                "verbose_name": "TVA Entry",
                "verbose_name_plural": "TVA Entries",
                "ordering": ["-period_year", "-period_month", "tva_type"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("pharmacy", "period_year", "period_month", "tva_type"),
                        name="uniq_tva_entry_pharmacy_period_type",
                    ),
                ],
            },
        ),
    ]
