"""
Payment adapters for external services.

All external payment API calls go through these adapters to ensure
consistent error handling, timeouts, idempotency and observability.

Usage:
    from payments.adapters import CheckoutSessionParams, StripeAdapter

    session = StripeAdapter.create_checkout_session(CheckoutSessionParams(...))
"""

from payments.adapters.stripe_adapter import (
    CheckoutSessionParams,
    CheckoutSessionResult,
    IdempotencyKeyGenerator,
    StripeAdapter,
)

__all__ = [
    "CheckoutSessionParams",
    "CheckoutSessionResult",
    "IdempotencyKeyGenerator",
    "StripeAdapter",
]
