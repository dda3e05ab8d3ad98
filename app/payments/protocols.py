"""
Protocol definitions for payment providers.

CheckoutService depends on this interface rather than on Stripe, so the
checkout authorizer can be exercised with an in-memory provider.

Usage:
    from payments.protocols import PaymentProvider

    def start_checkout(provider: PaymentProvider, params):
        return provider.create_checkout_session(params).url

    # StripeAdapter satisfies PaymentProvider without inheriting from it
    isinstance(StripeAdapter, PaymentProvider)  # True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from payments.adapters.stripe_adapter import (
        CheckoutSessionParams,
        CheckoutSessionResult,
    )


@runtime_checkable
class PaymentProvider(Protocol):
    """
    Protocol for hosted-checkout payment providers.

    Implementations raise a payments.exceptions.PaymentProcessingError
    subclass on any failure; they never retry.
    """

    def create_checkout_session(
        self, params: CheckoutSessionParams
    ) -> CheckoutSessionResult:
        """
        Create a hosted checkout session.

        Args:
            params: Amount, redirect URLs and correlation ids

        Returns:
            Session id and the URL to redirect the payer to
        """
        ...
