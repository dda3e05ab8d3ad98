"""
State machine enums for payment models.
"""

from payments.state_machines.states import (
    PaymentProviderName,
    PaymentStatus,
    StripeEventType,
)

__all__ = [
    "PaymentProviderName",
    "PaymentStatus",
    "StripeEventType",
]
