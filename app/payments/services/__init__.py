"""
Payment services.

This module provides:
- CheckoutService: Authorizes and starts a hosted checkout for a charge
- WebhookService: Records provider events once and reconciles them

Usage:
    from payments.services import CheckoutService, WebhookService

    result = CheckoutService.create_checkout_session(tenant, charge_id)
    redirect_to = result.url

    result = WebhookService.handle_provider_webhook(event)
"""

from payments.services.checkout_service import CheckoutResult, CheckoutService
from payments.services.webhook_service import WebhookService

__all__ = [
    "CheckoutResult",
    "CheckoutService",
    "WebhookService",
]
