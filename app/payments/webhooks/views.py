"""
Webhook endpoint views for Stripe.

This module provides the HTTP endpoint for receiving Stripe webhooks.
The view:
1. Verifies the webhook signature
2. Hands the event to WebhookService, which records and applies it
3. Returns 200 for processed, duplicate and unresolvable events

Processing is synchronous. An unexpected error propagates as a 500 and
rolls back the event record, so Stripe's redelivery retries it.

Usage:
    # In urls.py
    from payments.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
    ]
"""

from __future__ import annotations

import json
import logging

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.adapters import StripeAdapter
from payments.exceptions import StripeInvalidRequestError
from payments.services import WebhookService
from payments.state_machines import PaymentProviderName


logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> HttpResponse:
    """
    Receive and reconcile Stripe webhook events.

    Security:
    - Signature verification prevents spoofed webhooks
    - Unsigned events are accepted only when STRIPE_WEBHOOK_SECRET is
      empty and STRIPE_WEBHOOK_TRUST_UNSIGNED is enabled (local/test)
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Returns:
        HttpResponse with status:
        - 200: Event processed, duplicate, or not matched to a payment
        - 400: Invalid signature or payload

    Example Stripe-Signature header:
        t=1614556800,v1=xxx,v0=yyy
    """
    payload = request.body

    if not settings.STRIPE_WEBHOOK_SECRET and settings.STRIPE_WEBHOOK_TRUST_UNSIGNED:
        try:
            event_data = json.loads(payload)
        except (TypeError, ValueError):
            logger.warning("Unsigned webhook body is not valid JSON")
            return HttpResponse("Invalid payload", status=400)
        if not isinstance(event_data, dict):
            return HttpResponse("Invalid payload", status=400)
    else:
        signature = request.headers.get("Stripe-Signature", "")

        if not signature:
            logger.warning("Webhook received without Stripe-Signature header")
            return HttpResponse("Missing signature", status=400)

        try:
            event_data = StripeAdapter.verify_webhook_signature(payload, signature)
        except StripeInvalidRequestError as e:
            logger.warning(
                "Webhook signature verification failed",
                extra={"error": str(e)},
            )
            return HttpResponse("Invalid signature", status=400)

    result = WebhookService.handle_provider_webhook(
        event_data, provider=PaymentProviderName.STRIPE
    )

    if not result.success:
        return HttpResponse("Invalid event", status=400)

    if result.data["duplicate"]:
        return HttpResponse("Already processed", status=200)
    if not result.data["handled"]:
        return HttpResponse("Ignored", status=200)
    return HttpResponse("OK", status=200)
