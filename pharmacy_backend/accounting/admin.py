# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.models.tax_entry import TaxEntry

# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "pharmacy",
        "account_class",
        "normal_balance",
        "statement_bucket",
        "is_detail",
        "is_active",
    )
    list_filter = ("account_class", "normal_balance", "is_detail", "is_active", "pharmacy")
    search_fields = ("code", "name")
    ordering = ("pharmacy", "code")
    readonly_fields = ("statement_bucket", "created_at", "updated_at")

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("pharmacy", "code", "name", "account_class", "parent_code"),
            },
        ),
        (
            "Reporting",
            {
                "fields": ("normal_balance", "statement_bucket"),
            },
        ),
        (
            "Status",
            {
                "fields": ("is_detail", "is_active"),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )


# ============================================================
# JOURNAL ENTRY (READ-ONLY; writes go through the service)
# ============================================================


class JournalLineInline(admin.TabularInline):
    model = JournalLine
    extra = 0
    can_delete = False
    fields = (
        "line_number",
        "account_code",
        "description",
        "debit_amount",
        "credit_amount",
        "third_party_type",
        "third_party_name",
        "due_date",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(JournalEntry)
class JournalEntryAdmin(admin.ModelAdmin):
    list_display = (
        "entry_number",
        "pharmacy",
        "journal_code",
        "entry_date",
        "description",
        "status",
        "total_debit",
        "posted_at",
    )
    list_filter = ("status", "journal_code", "entry_date", "pharmacy")
    search_fields = ("entry_number", "description", "reference_number")
    ordering = ("-entry_date", "-entry_number")
    inlines = [JournalLineInline]

    readonly_fields = (
        "pharmacy",
        "entry_number",
        "journal_code",
        "entry_date",
        "description",
        "reference_type",
        "reference_number",
        "status",
        "total_debit",
        "total_credit",
        "posted_at",
        "is_auto_generated",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# TVA ENTRIES
# ============================================================


@admin.register(TaxEntry)
class TaxEntryAdmin(admin.ModelAdmin):
    list_display = (
        "pharmacy",
        "period_year",
        "period_month",
        "tva_type",
        "tva_19_amount",
        "tva_9_amount",
        "status",
        "g50_reference",
    )
    list_filter = ("tva_type", "status", "period_year", "pharmacy")
    search_fields = ("g50_reference",)
    ordering = ("-period_year", "-period_month", "tva_type")
    readonly_fields = ("declared_at", "created_at", "updated_at")
