"""
State enums for payment models.

These are Django TextChoices for database storage and admin integration,
used by django-fsm fields.

Payment States:
    pending → succeeded (provider confirmed, via webhook)
    pending → failed (checkout session expired)
    failed → succeeded (a late success event still settles the payment)
"""

from django.db import models


class PaymentStatus(models.TextChoices):
    """
    States for the Payment model lifecycle.

    Terminal state: SUCCEEDED. At most one PENDING payment exists per charge.
    """

    PENDING = "pending", "Pending"
    SUCCEEDED = "succeeded", "Succeeded"
    FAILED = "failed", "Failed"


class PaymentProviderName(models.TextChoices):
    """External payment providers a Payment or PaymentEvent can come from."""

    STRIPE = "stripe", "Stripe"


class StripeEventType(models.TextChoices):
    """Stripe webhook event types the reconciler acts on."""

    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed", "Checkout session completed"
    CHECKOUT_SESSION_EXPIRED = "checkout.session.expired", "Checkout session expired"
    PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded", "Payment intent succeeded"


__all__ = [
    "PaymentProviderName",
    "PaymentStatus",
    "StripeEventType",
]
