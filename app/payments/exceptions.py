"""
Payment-specific exceptions.

Each payment exception also derives from the matching core exception, so
core.views.error_response renders it with the right HTTP status.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentNotFoundError (NotFoundError) - Charge/payment lookup failures
    ├── ChargeNotPayableError (PermissionDeniedError) - Caller may not pay the charge
    ├── DuplicateCheckoutError (ConflictError) - A pending payment already exists
    └── PaymentProcessingError (ExternalServiceError) - Provider call failed
        └── StripeError - Base for all Stripe errors
            ├── StripeCardDeclinedError - Card declined (permanent)
            ├── StripeInvalidRequestError - Invalid request or signature (permanent)
            ├── StripeRateLimitError - Rate limited (transient)
            └── StripeAPIUnavailableError - API unavailable (transient)

Usage:
    from payments.exceptions import DuplicateCheckoutError

    raise DuplicateCheckoutError(
        "A checkout is already in progress for this charge",
        details={"charge_id": str(charge.id)},
    )

Note:
    Provider calls are never retried here. is_retryable only tells the
    client whether trying again later may succeed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
)

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """Base exception for all payment operations."""

    default_error_code: str = "PAYMENT_ERROR"


class PaymentNotFoundError(PaymentError, NotFoundError):
    """Raised when a charge or payment cannot be found for the caller."""

    default_error_code: str = "PAYMENT_NOT_FOUND"


class ChargeNotPayableError(PaymentError, PermissionDeniedError):
    """
    Raised when the caller may not start a checkout for a charge.

    Covers both a caller who is not the lease's tenant and a charge that
    is no longer due (paid or void).
    """

    default_error_code: str = "CHARGE_NOT_PAYABLE"


class DuplicateCheckoutError(PaymentError, ConflictError):
    """Raised when a pending payment already exists for the charge."""

    default_error_code: str = "DUPLICATE_CHECKOUT"


class PaymentProcessingError(PaymentError, ExternalServiceError):
    """
    Raised when the payment provider call fails.

    Surfaces as HTTP 502. Any transaction open around the provider call
    rolls back, so no pending payment survives the failure.
    """

    default_error_code: str = "PAYMENT_PROCESSING_ERROR"


# =============================================================================
# Stripe-Specific Exceptions
# =============================================================================


class StripeError(PaymentProcessingError):
    """
    Base exception for all Stripe-related errors.

    Attributes:
        stripe_code: Stripe's internal error code
        decline_code: Card decline code (if applicable)
        is_retryable: Whether a later attempt may succeed
    """

    default_error_code: str = "STRIPE_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        decline_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        if decline_code:
            details["decline_code"] = decline_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code
        self.decline_code = decline_code


class StripeCardDeclinedError(StripeError):
    default_error_code: str = "CARD_DECLINED"


class StripeInvalidRequestError(StripeError):
    """
    Raised for invalid parameters, bad credentials or a bad webhook signature.

    Permanent: the same request will fail again.
    """

    default_error_code: str = "STRIPE_INVALID_REQUEST"


class StripeRateLimitError(StripeError):
    default_error_code: str = "STRIPE_RATE_LIMITED"
    is_retryable: bool = True


class StripeAPIUnavailableError(StripeError):
    """Raised on network failures, timeouts and Stripe 5xx responses."""

    default_error_code: str = "STRIPE_UNAVAILABLE"
    is_retryable: bool = True
