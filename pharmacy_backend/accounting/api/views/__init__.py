# accounting/api/views/__init__.py

"""
accounting.api.views package

Do NOT import accounting.api.urls from here to avoid circular imports.
"""

from accounting.api.views.accounts import ChartAccountsView
from accounting.api.views.g50_export import G50ExportView
from accounting.api.views.journal_entries import JournalEntryViewSet
from accounting.api.views.reports import FinancialReportView

__all__ = [
    "ChartAccountsView",
    "FinancialReportView",
    "G50ExportView",
    "JournalEntryViewSet",
]
