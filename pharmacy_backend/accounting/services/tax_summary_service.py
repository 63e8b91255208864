# accounting/services/tax_summary_service.py

"""
======================================================
PATH: accounting/services/tax_summary_service.py
======================================================
TVA / G50 SERVICE

Monthly VAT declaration (G50) for one pharmacy.

Reads TaxEntry rows directly (not the journal): one collectee row and
one deductible row per (pharmacy, year, month).

RULES:
- Missing rows count as zeros; status defaults to "open"
- net = total collectée - total déductible
    tva_a_decaisser = net   if net > 0 else 0
    credit_tva      = -net  if net < 0 else 0
  (never both non-zero)
- status / g50_reference are read from the collectée row
- Declaring a period stamps BOTH rows; empty periods get zero rows
  so a nil declaration is still recorded
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date

from django.db import DatabaseError, transaction
from django.utils import timezone

from accounting.models.tax_entry import TaxEntry
from accounting.services.exceptions import InvalidParameter, StoreUnavailable
from accounting.services.money import ZERO, q2

logger = logging.getLogger(__name__)

MONTH_LABELS = (
    "",
    "Janvier",
    "Février",
    "Mars",
    "Avril",
    "Mai",
    "Juin",
    "Juillet",
    "Août",
    "Septembre",
    "Octobre",
    "Novembre",
    "Décembre",
)

NOT_PROVIDED = "Non renseigné"


def validate_period(year, month) -> tuple[int, int]:
    try:
        year = int(year)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter("year", f"{year!r} is not a valid year") from exc
    try:
        month = int(month)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter("month", f"{month!r} is not a valid month") from exc

    if not 1 <= month <= 12:
        raise InvalidParameter("month", "month must be between 1 and 12")
    if not date.min.year <= year <= date.max.year:
        raise InvalidParameter("year", "year is out of range")
    return year, month


def compute_g50_net(total_collectee, total_deductible) -> dict:
    net = q2(q2(total_collectee) - q2(total_deductible))
    return {
        "tva_a_decaisser": net if net > ZERO else ZERO,
        "credit_tva": -net if net < ZERO else ZERO,
    }


def _rate_block(row: TaxEntry | None, *, with_bases: bool = False) -> dict:
    tva_19 = q2(row.tva_19_amount) if row else ZERO
    tva_9 = q2(row.tva_9_amount) if row else ZERO
    block = {"tva_19": tva_19, "tva_9": tva_9, "total": q2(tva_19 + tva_9)}
    if with_bases:
        block.update(
            {
                "base_19": q2(row.tva_19_base) if row else ZERO,
                "base_9": q2(row.tva_9_base) if row else ZERO,
                "base_0": q2(row.tva_0_base) if row else ZERO,
            }
        )
        block["total_base"] = q2(block["base_19"] + block["base_9"] + block["base_0"])
    return block


class TaxSummaryService:
    def __init__(self, tax_model=TaxEntry):
        self.TaxEntry = tax_model

    def period_rows(self, pharmacy_id, year: int, month: int) -> dict:
        qs = self.TaxEntry.objects.filter(
            pharmacy_id=pharmacy_id,
            period_year=year,
            period_month=month,
        )
        try:
            return {row.tva_type: row for row in qs}
        except DatabaseError as exc:
            logger.exception(
                "TVA entries query failed",
                extra={"pharmacy_id": str(pharmacy_id), "year": year, "month": month},
            )
            raise StoreUnavailable("TVA entries are unavailable") from exc

    def _summary(self, pharmacy_id, year, month, *, with_bases: bool) -> dict:
        year, month = validate_period(year, month)
        rows = self.period_rows(pharmacy_id, year, month)

        collectee = rows.get(self.TaxEntry.TYPE_COLLECTEE)
        deductible = rows.get(self.TaxEntry.TYPE_DEDUCTIBLE)

        tva_collectee = _rate_block(collectee, with_bases=with_bases)
        tva_deductible = _rate_block(deductible, with_bases=with_bases)
        if with_bases:
            tva_deductible.pop("base_0")
            tva_deductible["total_base"] = q2(
                tva_deductible["base_19"] + tva_deductible["base_9"]
            )

        return {
            "report_type": "g50",
            "pharmacy_id": str(pharmacy_id),
            "period": f"{year:04d}-{month:02d}",
            "period_year": year,
            "period_month": month,
            "tva_collectee": tva_collectee,
            "tva_deductible": tva_deductible,
            **compute_g50_net(tva_collectee["total"], tva_deductible["total"]),
            "status": collectee.status if collectee else self.TaxEntry.STATUS_OPEN,
            "g50_reference": (collectee.g50_reference or None) if collectee else None,
        }

    def build_g50_summary(self, *, pharmacy_id, year, month) -> dict:
        return self._summary(pharmacy_id, year, month, with_bases=False)

    def build_g50_export(self, *, pharmacy, year, month) -> dict:
        data = self._summary(pharmacy.pk, year, month, with_bases=True)
        data.update(
            {
                "pharmacy_name": pharmacy.name,
                "pharmacy_nif": pharmacy.nif or None,
                "pharmacy_nis": pharmacy.nis or None,
                "pharmacy_rc": pharmacy.rc or None,
                "pharmacy_article": pharmacy.article_imposition or None,
                "pharmacy_address": pharmacy.full_address,
                "period_label": f"{MONTH_LABELS[data['period_month']]} {data['period_year']}",
                "generated_at": timezone.now().isoformat(),
            }
        )
        return data

    @transaction.atomic
    def mark_g50_declared(self, *, pharmacy, year, month, g50_reference=None) -> int:
        year, month = validate_period(year, month)
        declared_at = timezone.now()

        for tva_type in (self.TaxEntry.TYPE_COLLECTEE, self.TaxEntry.TYPE_DEDUCTIBLE):
            self.TaxEntry.objects.get_or_create(
                pharmacy=pharmacy,
                period_year=year,
                period_month=month,
                tva_type=tva_type,
            )

        updated = self.TaxEntry.objects.filter(
            pharmacy=pharmacy,
            period_year=year,
            period_month=month,
        ).update(
            status=self.TaxEntry.STATUS_DECLARED,
            g50_reference=(g50_reference or "").strip(),
            declared_at=declared_at,
            updated_at=declared_at,
        )

        logger.info(
            "G50 declared",
            extra={
                "pharmacy_id": str(pharmacy.pk),
                "period": f"{year:04d}-{month:02d}",
                "g50_reference": g50_reference,
            },
        )
        return updated


def render_g50_csv(export: dict) -> str:
    """Render a G50 export as the CSV declaration sheet."""
    c = export["tva_collectee"]
    d = export["tva_deductible"]

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    def comment(text=""):
        writer.writerow([text] if text else [])

    comment("# DÉCLARATION G50 - TVA")
    comment(f"# Période: {export['period_label']}")
    comment(f"# Pharmacie: {export['pharmacy_name']}")
    comment(f"# NIF: {export['pharmacy_nif'] or NOT_PROVIDED}")
    comment(f"# NIS: {export['pharmacy_nis'] or NOT_PROVIDED}")
    comment(f"# RC: {export['pharmacy_rc'] or NOT_PROVIDED}")
    comment(f"# Article: {export['pharmacy_article'] or NOT_PROVIDED}")
    comment(f"# Adresse: {export['pharmacy_address']}")
    comment()
    writer.writerow(["Section", "Taux", "Base HT (DZD)", "TVA (DZD)"])
    comment()
    comment("# TVA COLLECTÉE (sur ventes)")
    writer.writerow(["TVA Collectée", "19%", c["base_19"], c["tva_19"]])
    writer.writerow(["TVA Collectée", "9%", c["base_9"], c["tva_9"]])
    writer.writerow(["TVA Collectée", "0%", c["base_0"], ZERO])
    writer.writerow(["TOTAL COLLECTÉE", "", c["total_base"], c["total"]])
    comment()
    comment("# TVA DÉDUCTIBLE (sur achats)")
    writer.writerow(["TVA Déductible", "19%", d["base_19"], d["tva_19"]])
    writer.writerow(["TVA Déductible", "9%", d["base_9"], d["tva_9"]])
    writer.writerow(["TOTAL DÉDUCTIBLE", "", d["total_base"], d["total"]])
    comment()
    comment("# SOLDE")
    writer.writerow(["TVA À DÉCAISSER", "", "", export["tva_a_decaisser"]])
    writer.writerow(["CRÉDIT TVA (report)", "", "", export["credit_tva"]])
    comment()
    comment(f"# Généré le: {export['generated_at']}")

    return buffer.getvalue()


def build_g50_summary(*, pharmacy_id, year, month) -> dict:
    return TaxSummaryService().build_g50_summary(pharmacy_id=pharmacy_id, year=year, month=month)


def build_g50_export(*, pharmacy, year, month) -> dict:
    return TaxSummaryService().build_g50_export(pharmacy=pharmacy, year=year, month=month)


def mark_g50_declared(*, pharmacy, year, month, g50_reference=None) -> int:
    return TaxSummaryService().mark_g50_declared(
        pharmacy=pharmacy, year=year, month=month, g50_reference=g50_reference
    )
