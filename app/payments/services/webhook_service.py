"""
Webhook service: the idempotency gate in front of the handler registry.

Each provider event is processed at most once. The PaymentEvent insert and
the state change it triggers commit together, so an event is either fully
applied and recorded, or neither (and the provider's redelivery retries).

Usage:
    from payments.services import WebhookService

    result = WebhookService.handle_provider_webhook(event)
    if result.success and result.data["duplicate"]:
        ...
"""

from __future__ import annotations

from typing import Any

from django.db import IntegrityError, transaction

from core.services import BaseService, ServiceResult
from payments.models import PaymentEvent
from payments.state_machines import PaymentProviderName
from payments.webhooks.handlers import dispatch_webhook


class WebhookService(BaseService):
    """Reconciles verified provider events against local payment state."""

    @classmethod
    def handle_provider_webhook(
        cls,
        event: dict[str, Any],
        provider: str = PaymentProviderName.STRIPE,
    ) -> ServiceResult[dict[str, Any]]:
        """
        Record and apply one provider event.

        Args:
            event: Verified event body (id, type, data.object)
            provider: Provider the event came from

        Returns:
            success with {"event_id", "event_type", "duplicate", "handled"};
            failure INVALID_WEBHOOK_PAYLOAD when id or type is missing
            or not a string.
            Unresolvable events succeed with handled False.

        Raises:
            Database errors propagate and roll back the PaymentEvent insert.
        """
        logger = cls.get_logger()
        event_id = event.get("id") if isinstance(event, dict) else None
        event_type = event.get("type") if isinstance(event, dict) else None

        if not (
            isinstance(event_id, str)
            and isinstance(event_type, str)
            and event_id
            and event_type
        ):
            logger.warning("Webhook missing required fields")
            return ServiceResult.failure(
                "Webhook event is missing id or type",
                error_code="INVALID_WEBHOOK_PAYLOAD",
            )

        log_context = {
            "provider": provider,
            "event_id": event_id,
            "event_type": event_type,
        }

        with cls.atomic():
            if PaymentEvent.objects.filter(provider=provider, event_id=event_id).exists():
                logger.info("Webhook already processed, skipping", extra=log_context)
                return cls._duplicate(event_id, event_type)

            try:
                with transaction.atomic():
                    payment_event = PaymentEvent.objects.create(
                        provider=provider,
                        event_id=event_id,
                        event_type=event_type,
                        payload=event,
                    )
            except IntegrityError:
                # Concurrent delivery of the same event won the insert
                logger.info("Webhook recorded concurrently, skipping", extra=log_context)
                return cls._duplicate(event_id, event_type)

            result = dispatch_webhook(payment_event)

        handled = bool(result.success and result.data is not None)
        logger.info(
            "Webhook processed",
            extra={**log_context, "handled": handled},
        )
        return ServiceResult.success(
            {
                "event_id": event_id,
                "event_type": event_type,
                "duplicate": False,
                "handled": handled,
            }
        )

    @staticmethod
    def _duplicate(event_id: str, event_type: str) -> ServiceResult[dict[str, Any]]:
        return ServiceResult.success(
            {
                "event_id": event_id,
                "event_type": event_type,
                "duplicate": True,
                "handled": False,
            }
        )
