"""
Payments app configuration.

This app provides rent payment processing:
- Hosted checkout for due charges
- Idempotent Stripe webhook reconciliation
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
