# accounting/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounting.api.views.accounts import ChartAccountsView
from accounting.api.views.g50_export import G50ExportView
from accounting.api.views.journal_entries import JournalEntryViewSet
from accounting.api.views.reports import FinancialReportView

router = DefaultRouter()
router.register("journal-entries", JournalEntryViewSet, basename="journal-entry")

urlpatterns = [
    path("", include(router.urls)),
    # Reports
    path("reports/", FinancialReportView.as_view(), name="financial-reports"),
    path("g50-export/", G50ExportView.as_view(), name="g50-export"),
    # Master data (read-only)
    path("accounts/", ChartAccountsView.as_view(), name="accounts"),
]
