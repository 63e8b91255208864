# pharmacies/apps.py

"""
PHARMACIES APP CONFIG

Tenant master data:
- One Pharmacy row per tenant
- Every accounting record is scoped to a pharmacy
"""

from django.apps import AppConfig


class PharmaciesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pharmacies"
    verbose_name = "Pharmacies"
