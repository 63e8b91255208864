"""
======================================================
PATH: pharmacies/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Pharmacy (tenant master data)
"""

from __future__ import annotations

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Pharmacy",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Unique pharmacy code (optional). If set, must be unique.",
                        max_length=50,
                        null=True,
                    ),
                ),
                ("address", models.TextField(blank=True)),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("wilaya", models.CharField(blank=True, default="", max_length=100)),
                ("nif", models.CharField(blank=True, default="", max_length=32)),
                ("nis", models.CharField(blank=True, default="", max_length=32)),
                ("rc", models.CharField(blank=True, default="", max_length=32)),
                (
                    "article_imposition",
                    models.CharField(blank=True, default="", max_length=32),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Pharmacy",
                "verbose_name_plural": "Pharmacies",
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(
                            ("code__isnull", False), models.Q(("code", ""), _negated=True)
                        ),
                        fields=("code",),
                        name="uniq_pharmacy_code_when_present",
                    )
                ],
            },
        ),
    ]
