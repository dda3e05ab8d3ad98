"""
Webhook handling for payment events from Stripe.

This module provides views and handlers for processing Stripe webhooks.
Webhooks are verified, recorded once per event id, and reconciled
synchronously by payments.services.WebhookService.

Usage:
    # In urls.py
    from payments.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
    ]
"""

from payments.webhooks.handlers import dispatch_webhook, register_handler

__all__ = [
    "dispatch_webhook",
    "register_handler",
]
