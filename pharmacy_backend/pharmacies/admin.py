# pharmacies/admin.py

from django.contrib import admin

from pharmacies.models import Pharmacy


@admin.register(Pharmacy)
class PharmacyAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "wilaya", "nif", "is_active", "created_at")
    list_filter = ("is_active", "wilaya")
    search_fields = ("name", "code", "nif")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("name",)
