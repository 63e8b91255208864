# accounting/services/chart_seed.py

"""
STANDARD PHARMACY CHART (SCF)

Default chart installed for every new pharmacy.

Rules:
- Idempotent: keyed by (pharmacy, code)
- Existing accounts keep their normal_balance (immutable once posted);
  only name / parent / flags are corrected
- statement_bucket is resolved by Account.clean() on first save
"""

from __future__ import annotations

import logging

from django.db import transaction

from accounting.models.account import Account

logger = logging.getLogger(__name__)

D = Account.NORMAL_DEBIT
C = Account.NORMAL_CREDIT

# (code, name, normal_balance, is_detail, parent_code)
STANDARD_PHARMACY_CHART = [
    # Classe 1 - Capitaux
    ("101", "Capital social", C, True, ""),
    ("106", "Réserves", C, True, ""),
    ("110", "Report à nouveau", C, True, ""),
    ("120", "Résultat de l'exercice", C, True, ""),
    ("164", "Emprunts auprès des établissements de crédit", C, True, ""),
    # Classe 2 - Immobilisations
    ("215", "Installations techniques, matériel", D, True, ""),
    ("218", "Autres immobilisations corporelles", D, True, ""),
    ("281", "Amortissements des immobilisations corporelles", C, True, ""),
    # Classe 3 - Stocks
    ("30", "Stocks de marchandises", D, False, ""),
    ("300", "Stock médicaments", D, True, "30"),
    ("301", "Stock parapharmacie", D, True, "30"),
    # Classe 4 - Tiers
    ("401", "Fournisseurs", C, True, ""),
    ("408", "Fournisseurs, factures non parvenues", C, True, ""),
    ("411", "Clients", D, True, ""),
    ("4111", "Clients CHIFA (CNAS)", D, True, "411"),
    ("4112", "Clients CASNOS", D, True, "411"),
    ("431", "Organismes sociaux", C, True, ""),
    ("444", "Impôts sur les résultats", C, True, ""),
    ("4456", "TVA déductible", D, True, ""),
    ("4457", "TVA collectée", C, True, ""),
    ("467", "Autres comptes débiteurs ou créditeurs", D, True, ""),
    # Classe 5 - Financiers
    ("512", "Banque", D, True, ""),
    ("530", "Caisse", D, True, ""),
    # Classe 6 - Charges
    ("600", "Achats de marchandises vendues", D, True, ""),
    ("603", "Variation des stocks de marchandises", D, True, ""),
    ("613", "Locations", D, True, ""),
    ("616", "Primes d'assurances", D, True, ""),
    ("626", "Frais postaux et de télécommunications", D, True, ""),
    ("631", "Rémunérations du personnel", D, True, ""),
    ("635", "Cotisations aux organismes sociaux", D, True, ""),
    ("641", "Impôts, taxes et versements assimilés", D, True, ""),
    ("658", "Autres charges de gestion courante", D, True, ""),
    ("661", "Charges d'intérêts", D, True, ""),
    ("681", "Dotations aux amortissements", D, True, ""),
    ("695", "Impôts sur les bénéfices", D, True, ""),
    # Classe 7 - Produits
    ("700", "Ventes de marchandises", C, False, ""),
    ("7001", "Ventes de médicaments", C, True, "700"),
    ("7002", "Ventes de parapharmacie", C, True, "700"),
    ("758", "Autres produits de gestion courante", C, True, ""),
    ("768", "Autres produits financiers", C, True, ""),
]


@transaction.atomic
def seed_pharmacy_chart(pharmacy) -> tuple[int, int]:
    """Install the standard chart for a pharmacy. Returns (created, updated)."""
    created_count = 0
    updated_count = 0

    for code, name, normal_balance, is_detail, parent_code in STANDARD_PHARMACY_CHART:
        acc, created = Account.objects.get_or_create(
            pharmacy=pharmacy,
            code=code,
            defaults={
                "name": name,
                "normal_balance": normal_balance,
                "is_detail": is_detail,
                "parent_code": parent_code,
                "is_active": True,
            },
        )
        if created:
            created_count += 1
            continue

        changes = {
            "name": name,
            "is_detail": is_detail,
            "parent_code": parent_code,
            "is_active": True,
        }
        dirty = [field for field, value in changes.items() if getattr(acc, field) != value]
        if dirty:
            for field in dirty:
                setattr(acc, field, changes[field])
            acc.save()
            updated_count += 1

    logger.info(
        "Pharmacy chart seeded",
        extra={
            "pharmacy_id": str(pharmacy.pk),
            "accounts_created": created_count,
            "accounts_updated": updated_count,
        },
    )
    return created_count, updated_count
