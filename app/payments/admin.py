"""
Payment admin configuration.

Payments and payment events are read-only here: their state is owned
by checkout and webhook reconciliation.
"""

from django.contrib import admin

from payments.models import Payment, PaymentEvent


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Visibility into checkout attempts and their settlement."""

    list_display = [
        "id",
        "charge",
        "provider",
        "provider_payment_id",
        "status",
        "amount",
        "paid_at",
        "created_at",
    ]
    list_filter = ["status", "provider", "created_at"]
    search_fields = ["id", "provider_payment_id", "charge__lease__tenant__email"]
    readonly_fields = [
        "id",
        "charge",
        "provider",
        "provider_payment_id",
        "status",
        "amount",
        "currency",
        "paid_at",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]


@admin.register(PaymentEvent)
class PaymentEventAdmin(admin.ModelAdmin):
    """
    Visibility into received webhook events.

    Events are immutable once received.
    """

    list_display = ["id", "provider", "event_id", "event_type", "created_at"]
    list_filter = ["provider", "event_type", "created_at"]
    search_fields = ["id", "event_id", "event_type"]
    readonly_fields = [
        "id",
        "provider",
        "event_id",
        "event_type",
        "payload",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
