"""
Webhook event handlers for Stripe events.

This module provides a handler registry and implementations for
reconciling Stripe webhook events against Payments and Charges.

Handlers run inside the transaction opened by WebhookService, after the
PaymentEvent row has been inserted. An event that cannot be matched to a
Payment is a no-op; every handler is safe to run any number of times and
in any order relative to the others.

Usage:
    from payments.webhooks.handlers import dispatch_webhook, register_handler

    # Register a custom handler
    @register_handler("custom.event")
    def handle_custom_event(event: PaymentEvent) -> ServiceResult:
        ...

    # Dispatch an event to its handler
    result = dispatch_webhook(event)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from core.helpers import validate_uuid
from core.services import ServiceResult
from payments.models import Payment, PaymentEvent
from payments.state_machines import PaymentStatus, StripeEventType
from rentals.models import Charge, ChargeStatus

if TYPE_CHECKING:
    from typing import Any


logger = logging.getLogger(__name__)


# =============================================================================
# Handler Registry
# =============================================================================


# Maps event type strings to handler functions
WEBHOOK_HANDLERS: dict[str, Callable[[PaymentEvent], ServiceResult]] = {}


def register_handler(event_type: str) -> Callable:
    """
    Decorator to register a webhook event handler.

    Usage:
        @register_handler("payment_intent.succeeded")
        def handle_payment_intent_succeeded(event: PaymentEvent) -> ServiceResult:
            ...

    Args:
        event_type: The Stripe event type (e.g., "payment_intent.succeeded")

    Returns:
        Decorator function that registers the handler
    """

    def decorator(func: Callable[[PaymentEvent], ServiceResult]) -> Callable:
        WEBHOOK_HANDLERS[event_type] = func
        logger.debug(f"Registered webhook handler for {event_type}")
        return func

    return decorator


def dispatch_webhook(event: PaymentEvent) -> ServiceResult:
    """
    Dispatch a recorded event to the appropriate handler.

    If no handler is registered the event stays recorded and nothing else
    happens.

    Returns:
        ServiceResult from the handler, or success(None) if no handler
    """
    handler = WEBHOOK_HANDLERS.get(event.event_type)

    if not handler:
        logger.info(
            f"No handler registered for event type: {event.event_type}",
            extra={"event_id": event.event_id},
        )
        return ServiceResult.success(None)

    logger.info(
        f"Dispatching {event.event_type} to handler",
        extra={"event_id": event.event_id},
    )

    return handler(event)


# =============================================================================
# Helpers
# =============================================================================


def _event_object(event: PaymentEvent) -> dict[str, Any]:
    """Return payload.data.object, or {} when any level is missing."""
    data = event.payload.get("data") if isinstance(event.payload, dict) else None
    obj = data.get("object") if isinstance(data, dict) else None
    return obj if isinstance(obj, dict) else {}


def _metadata_payment_id(obj: dict[str, Any]) -> str | None:
    metadata = obj.get("metadata")
    if not isinstance(metadata, dict):
        return None
    return metadata.get("payment_id")


def _locked_payment(**filters) -> Payment | None:
    return Payment.objects.select_for_update().filter(**filters).first()


def _apply_payment_succeeded(
    payment: Payment,
    payment_intent_id: str | None = None,
) -> Payment:
    """
    Move a locked Payment to succeeded and its Charge to paid.

    Converges to the same state however often it runs: an already
    succeeded payment keeps its original paid_at, an already paid charge
    is left alone. A void charge stays void.
    """
    update_fields = []

    if payment.status != PaymentStatus.SUCCEEDED:
        payment.mark_succeeded()
        update_fields += ["status", "paid_at"]

    if payment_intent_id and payment.provider_payment_id != payment_intent_id:
        payment.provider_payment_id = payment_intent_id
        update_fields.append("provider_payment_id")

    if update_fields:
        payment.save(update_fields=[*update_fields, "updated_at"])

    charge = Charge.objects.select_for_update().get(id=payment.charge_id)

    if charge.status == ChargeStatus.DUE:
        charge.mark_paid()
        charge.save(update_fields=["status", "updated_at"])
        logger.info(
            "Charge marked paid",
            extra={"charge_id": str(charge.id), "payment_id": str(payment.id)},
        )
    elif charge.status == ChargeStatus.VOID:
        logger.warning(
            "Payment succeeded for a void charge; charge left void",
            extra={"charge_id": str(charge.id), "payment_id": str(payment.id)},
        )

    return payment


# =============================================================================
# Checkout Session Handlers
# =============================================================================


def _payment_for_session(event: PaymentEvent, session: dict[str, Any]) -> Payment | None:
    """
    Lock the Payment a checkout session belongs to.

    metadata.payment_id wins when present, otherwise the checkout session
    id stored at creation.
    """
    session_id = session.get("id")
    payment_id = _metadata_payment_id(session)

    logger.info(
        f"Processing {event.event_type}",
        extra={
            "event_id": event.event_id,
            "checkout_session_id": session_id,
            "payment_id": payment_id,
        },
    )

    payment = None
    if payment_id:
        if validate_uuid(payment_id):
            payment = _locked_payment(id=payment_id)
    elif session_id:
        payment = _locked_payment(provider_payment_id=session_id)

    if payment is None:
        logger.warning(
            "Payment not found for checkout session",
            extra={
                "event_id": event.event_id,
                "checkout_session_id": session_id,
                "payment_id": payment_id,
            },
        )
    return payment


@register_handler(StripeEventType.CHECKOUT_SESSION_COMPLETED)
def handle_checkout_session_completed(event: PaymentEvent) -> ServiceResult:
    """
    Handle a completed hosted checkout.

    Returns:
        ServiceResult with the Payment, or success(None) if unresolvable
    """
    session = _event_object(event)
    payment_intent = session.get("payment_intent")
    if isinstance(payment_intent, dict):
        payment_intent = payment_intent.get("id")

    payment = _payment_for_session(event, session)
    if payment is None:
        return ServiceResult.success(None)

    payment = _apply_payment_succeeded(payment, payment_intent_id=payment_intent or None)
    return ServiceResult.success(payment)


@register_handler(StripeEventType.CHECKOUT_SESSION_EXPIRED)
def handle_checkout_session_expired(event: PaymentEvent) -> ServiceResult:
    """
    Handle a hosted checkout that expired unpaid.

    A pending Payment becomes failed, which releases the charge for a new
    checkout. Succeeded and already failed payments are left as they are.

    Returns:
        ServiceResult with the Payment, or success(None) if unresolvable
    """
    payment = _payment_for_session(event, _event_object(event))
    if payment is None:
        return ServiceResult.success(None)

    if payment.status == PaymentStatus.PENDING:
        payment.mark_failed()
        payment.save(update_fields=["status", "updated_at"])
        logger.info(
            "Payment marked failed after checkout expiry",
            extra={"payment_id": str(payment.id), "charge_id": str(payment.charge_id)},
        )
    else:
        logger.info(
            "Checkout expiry ignored for settled payment",
            extra={"payment_id": str(payment.id), "status": payment.status},
        )

    return ServiceResult.success(payment)


# =============================================================================
# Payment Intent Handlers
# =============================================================================


@register_handler(StripeEventType.PAYMENT_INTENT_SUCCEEDED)
def handle_payment_intent_succeeded(event: PaymentEvent) -> ServiceResult:
    """
    Handle successful payment confirmation.

    The Payment is found by provider_payment_id == intent id. If the
    checkout event has not arrived yet the Payment still holds the session
    id, so the intent's metadata.payment_id is used instead.

    Returns:
        ServiceResult with the Payment, or success(None) if unresolvable
    """
    intent = _event_object(event)
    intent_id = intent.get("id")
    payment_id = _metadata_payment_id(intent)

    logger.info(
        "Processing payment_intent.succeeded",
        extra={
            "event_id": event.event_id,
            "payment_intent_id": intent_id,
            "payment_id": payment_id,
        },
    )

    payment = None
    if intent_id:
        payment = _locked_payment(provider_payment_id=intent_id)
    if payment is None and validate_uuid(payment_id):
        payment = _locked_payment(id=payment_id)

    if payment is None:
        logger.warning(
            "Payment not found for payment intent",
            extra={"event_id": event.event_id, "payment_intent_id": intent_id},
        )
        return ServiceResult.success(None)

    payment = _apply_payment_succeeded(payment, payment_intent_id=intent_id)
    return ServiceResult.success(payment)
