# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import AccountListSerializer
from accounting.api.serializers.g50 import G50DeclareSerializer
from accounting.api.serializers.journal_entries import (
    JournalEntryCreateSerializer,
    JournalEntrySerializer,
    JournalLineInputSerializer,
    JournalLineSerializer,
)

__all__ = [
    "AccountListSerializer",
    "G50DeclareSerializer",
    "JournalEntryCreateSerializer",
    "JournalEntrySerializer",
    "JournalLineInputSerializer",
    "JournalLineSerializer",
]
