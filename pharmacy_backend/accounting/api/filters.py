# accounting/api/filters.py

import django_filters

from accounting.models.journal import JournalEntry


class JournalEntryFilter(django_filters.FilterSet):
    """
    /api/accounting/journal-entries/?status=posted&journal_code=VT
        &start_date=2026-01-01&end_date=2026-01-31&account_code=411
    """

    status = django_filters.ChoiceFilter(choices=JournalEntry.STATUS_CHOICES)
    journal_code = django_filters.ChoiceFilter(choices=JournalEntry.JOURNAL_CODES)
    start_date = django_filters.DateFilter(field_name="entry_date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="entry_date", lookup_expr="lte")
    account_code = django_filters.CharFilter(method="filter_account_code")

    class Meta:
        model = JournalEntry
        fields = ["status", "journal_code", "start_date", "end_date", "account_code"]

    def filter_account_code(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(lines__account_code__startswith=value).distinct()
