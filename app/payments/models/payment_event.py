"""
PaymentEvent model: deduplication record and audit trail for provider webhooks.

Every webhook event that passes signature verification is recorded once,
keyed by (provider, event_id). The unique constraint is the idempotency
gate: an insert that collides means the event was already handled.

Usage:
    from payments.models import PaymentEvent

    PaymentEvent.objects.create(
        provider="stripe",
        event_id="evt_1234567890",
        event_type="checkout.session.completed",
        payload=event,
    )
"""

from __future__ import annotations

from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from payments.state_machines import PaymentProviderName


class PaymentEvent(UUIDPrimaryKeyMixin, BaseModel):
    """
    A provider webhook event that has been processed.

    Rows are write-once: saving an existing event raises ValueError.

    Fields:
        provider: Payment provider that sent the event
        event_id: Provider's event id (evt_xxx)
        event_type: Provider's event type (e.g., 'checkout.session.completed')
        payload: Full event body as received
    """

    provider = models.CharField(
        max_length=20,
        choices=PaymentProviderName.choices,
        default=PaymentProviderName.STRIPE,
    )
    event_id = models.CharField(
        max_length=255,
        help_text="Provider event id - unique per provider for idempotency",
    )
    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Provider event type",
    )
    payload = models.JSONField(
        help_text="Full webhook payload (JSON)",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payment Event"
        verbose_name_plural = "Payment Events"
        constraints = [
            models.UniqueConstraint(
                fields=["provider", "event_id"],
                name="payment_event_unique_provider_event",
            ),
        ]

    def __str__(self) -> str:
        return f"PaymentEvent({self.provider}:{self.event_id}, {self.event_type})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("PaymentEvent records are write-once")
        super().save(*args, **kwargs)

    def get_object_id(self) -> str | None:
        """Return payload.data.object.id if present."""
        try:
            return self.payload.get("data", {}).get("object", {}).get("id")
        except (AttributeError, TypeError):
            return None
