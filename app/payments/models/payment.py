"""
Payment model: one attempt to settle a Charge through the provider.

Usage:
    from payments.models import Payment
    from payments.state_machines import PaymentStatus

    payment = Payment.objects.create(charge=charge, amount=charge.amount)

    # State transitions using django-fsm
    payment.mark_succeeded()  # pending -> succeeded, stamps paid_at
    payment.save()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from payments.state_machines import PaymentProviderName, PaymentStatus


class Payment(UUIDPrimaryKeyMixin, BaseModel):
    """
    A checkout attempt for a Charge.

    State Flow:
        PENDING -> SUCCEEDED (webhook reconciliation)
        PENDING -> FAILED
        FAILED -> SUCCEEDED (late success event)

    Fields:
        charge: The charge being paid
        provider: Payment provider (stripe)
        provider_payment_id: Checkout session id at creation, replaced by
            the PaymentIntent id once the provider reports it
        status: Current FSM state
        amount: Copied from the charge at creation, never changed
        currency: ISO 4217 code, always settings.PAYMENT_CURRENCY
        paid_at: First time the payment was confirmed

    Note:
        The partial unique constraint on (charge) where status is pending
        guarantees a single in-flight checkout per charge even when two
        requests race past the application-level check.
    """

    charge = models.ForeignKey(
        "rentals.Charge",
        on_delete=models.CASCADE,
        related_name="payments",
        help_text="Charge this payment settles",
    )
    provider = models.CharField(
        max_length=20,
        choices=PaymentProviderName.choices,
        default=PaymentProviderName.STRIPE,
    )
    provider_payment_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        db_index=True,
        help_text="Checkout session id (cs_xxx), then PaymentIntent id (pi_xxx)",
    )
    status = FSMField(
        default=PaymentStatus.PENDING,
        choices=PaymentStatus.choices,
        db_index=True,
        help_text="Current state of the payment (managed by FSM)",
        protected=True,  # Only transitions may change it
    )
    amount = models.PositiveIntegerField(
        help_text="Amount in cents, copied from the charge",
    )
    currency = models.CharField(
        max_length=3,
        default=settings.PAYMENT_CURRENCY,
        help_text="ISO 4217 currency code (lowercase)",
    )
    paid_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the provider first confirmed this payment",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["charge", "status"], name="payment_charge_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["charge"],
                condition=models.Q(status="pending"),
                name="payment_one_pending_per_charge",
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payment_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"Payment({self.id}, {self.status}, {self.amount / 100:.2f} {self.currency.upper()})"

    @property
    def is_succeeded(self) -> bool:
        return self.status == PaymentStatus.SUCCEEDED

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=[PaymentStatus.PENDING, PaymentStatus.FAILED],
        target=PaymentStatus.SUCCEEDED,
    )
    def mark_succeeded(self):
        """
        Record provider confirmation.

        Transition: PENDING/FAILED -> SUCCEEDED
        """
        if self.paid_at is None:
            self.paid_at = timezone.now()

    @transition(field=status, source=PaymentStatus.PENDING, target=PaymentStatus.FAILED)
    def mark_failed(self):
        """
        Record that the checkout did not complete.

        Transition: PENDING -> FAILED
        """
