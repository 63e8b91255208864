# accounting/api/tenancy.py

"""
Tenant resolution for accounting endpoints.

The pharmacy comes from the tenant header (settings.ACCOUNTING_TENANT_HEADER,
"X-Pharmacy-ID" by default) or the `pharmacy_id` query parameter.
Only active pharmacies are served.
"""

from __future__ import annotations

import uuid

from django.conf import settings
from rest_framework.exceptions import NotFound, ParseError

from pharmacies.models import Pharmacy


def _tenant_header() -> str:
    return getattr(settings, "ACCOUNTING_TENANT_HEADER", "HTTP_X_PHARMACY_ID")


def get_request_pharmacy(request) -> Pharmacy:
    raw = request.META.get(_tenant_header()) or request.query_params.get("pharmacy_id")
    raw = (raw or "").strip()
    if not raw:
        raise ParseError("pharmacy_id is required (X-Pharmacy-ID header or query parameter).")

    try:
        pharmacy_id = uuid.UUID(raw)
    except ValueError as exc:
        raise ParseError("pharmacy_id must be a UUID.") from exc

    pharmacy = Pharmacy.objects.filter(pk=pharmacy_id, is_active=True).first()
    if pharmacy is None:
        raise NotFound("Pharmacy not found.")
    return pharmacy
