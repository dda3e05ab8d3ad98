"""
Django admin configuration for rental models.

Charges are read-only for status: paid is only ever set by webhook
reconciliation.
"""

from django.contrib import admin

from rentals.models import Charge, Lease, Property, Unit


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "city", "state", "created_at")
    search_fields = ("name", "address_line1", "city", "owner__email")
    raw_id_fields = ("owner",)


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ("name", "property", "created_at")
    search_fields = ("name", "property__name")
    raw_id_fields = ("property",)


@admin.register(Lease)
class LeaseAdmin(admin.ModelAdmin):
    list_display = ("id", "unit", "tenant", "rent_amount", "due_day", "start_date", "end_date")
    list_filter = ("due_day",)
    search_fields = ("tenant__email", "unit__name")
    raw_id_fields = ("unit", "tenant")


@admin.register(Charge)
class ChargeAdmin(admin.ModelAdmin):
    list_display = ("id", "lease", "amount", "due_date", "status")
    list_filter = ("status", "due_date")
    search_fields = ("lease__tenant__email",)
    raw_id_fields = ("lease",)
    readonly_fields = ("status", "created_at", "updated_at")
