# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Models import services lazily only (Account.clean resolves its bucket).
"""

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.models.tax_entry import TaxEntry

__all__ = [
    "Account",
    "JournalEntry",
    "JournalLine",
    "TaxEntry",
]
