"""
Payment domain models.

- Payment: A checkout attempt settling a rentals.Charge
- PaymentEvent: Provider webhook events, recorded once for idempotency
"""

from payments.models.payment import Payment
from payments.models.payment_event import PaymentEvent

__all__ = [
    "Payment",
    "PaymentEvent",
]
