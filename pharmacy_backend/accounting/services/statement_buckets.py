# accounting/services/statement_buckets.py

"""
STATEMENT BUCKETS (AUTHORITATIVE CLASSIFICATION TABLE)

Maps SCF account-code prefixes to the reporting bucket an account feeds.

Rules:
- Resolution happens ONCE, when an account is created (Account.clean)
- Longest matching prefix wins (e.g. "695" beats "69", "7001" beats "70")
- Prefixes are unique across the table, so resolution is deterministic
- Accounts matching no prefix get "" and are ignored by the statements
"""

from __future__ import annotations

# Income statement: revenue (credit-signed)
SALES_MEDICATIONS = "sales_medications"
SALES_PARAPHARMACY = "sales_parapharmacy"
OTHER_REVENUE = "other_revenue"
FINANCIAL_INCOME = "financial_income"

# Income statement: expenses (debit-signed)
PURCHASES = "purchases"
STOCK_VARIATION = "stock_variation"
EXTERNAL_SERVICES = "external_services"
PERSONNEL = "personnel"
TAXES = "taxes"
OTHER_EXPENSES = "other_expenses"
FINANCIAL_CHARGES = "financial_charges"
DEPRECIATION = "depreciation"
INCOME_TAX = "income_tax"

# Balance sheet
EQUITY = "equity"
FIXED_ASSETS = "fixed_assets"
INVENTORY = "inventory"
SUPPLIERS = "suppliers"
RECEIVABLES = "receivables"
OTHER_PAYABLES = "other_payables"
CASH_BANK = "cash_bank"

BUCKET_PREFIXES: dict[str, tuple[str, ...]] = {
    SALES_MEDICATIONS: ("7001",),
    SALES_PARAPHARMACY: ("7002",),
    OTHER_REVENUE: ("75",),
    FINANCIAL_INCOME: ("76",),
    PURCHASES: ("600",),
    STOCK_VARIATION: ("603",),
    EXTERNAL_SERVICES: ("61", "62"),
    PERSONNEL: ("63",),
    TAXES: ("64",),
    OTHER_EXPENSES: ("65",),
    FINANCIAL_CHARGES: ("66",),
    DEPRECIATION: ("68",),
    INCOME_TAX: ("695",),
    EQUITY: ("1",),
    FIXED_ASSETS: ("2",),
    INVENTORY: ("3",),
    SUPPLIERS: ("40",),
    RECEIVABLES: ("411", "46"),
    OTHER_PAYABLES: ("43", "44"),
    CASH_BANK: ("5",),
}

REVENUE_BUCKETS = (
    SALES_MEDICATIONS,
    SALES_PARAPHARMACY,
    OTHER_REVENUE,
    FINANCIAL_INCOME,
)

EXPENSE_BUCKETS = (
    PURCHASES,
    STOCK_VARIATION,
    EXTERNAL_SERVICES,
    PERSONNEL,
    TAXES,
    DEPRECIATION,
    FINANCIAL_CHARGES,
    OTHER_EXPENSES,
)

ASSET_BUCKETS = (FIXED_ASSETS, INVENTORY, RECEIVABLES, CASH_BANK)
LIABILITY_BUCKETS = (EQUITY, SUPPLIERS, OTHER_PAYABLES)

BUCKET_CHOICES = [(bucket, bucket.replace("_", " ").title()) for bucket in BUCKET_PREFIXES]

_PREFIX_INDEX: dict[str, str] = {
    prefix: bucket
    for bucket, prefixes in BUCKET_PREFIXES.items()
    for prefix in prefixes
}

if len(_PREFIX_INDEX) != sum(len(p) for p in BUCKET_PREFIXES.values()):
    raise RuntimeError("Statement bucket prefixes must be unique")


def resolve_statement_bucket(code: str) -> str:
    """
    Return the bucket for an account code using longest-prefix match.

    >>> resolve_statement_bucket("6951")
    'income_tax'
    >>> resolve_statement_bucket("4457")
    'other_payables'
    """
    code = (code or "").strip()
    for length in range(len(code), 0, -1):
        bucket = _PREFIX_INDEX.get(code[:length])
        if bucket:
            return bucket
    return ""
