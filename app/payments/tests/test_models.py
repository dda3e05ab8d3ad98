"""
Tests for payment models.

Tests cover:
- Payment state transitions (django-fsm) and paid_at stamping
- One pending payment per charge (partial unique constraint)
- PaymentEvent uniqueness and write-once behaviour
"""

from datetime import datetime, timezone

import pytest
from django.db import IntegrityError, transaction
from django_fsm import TransitionNotAllowed
from freezegun import freeze_time

from payments.state_machines import PaymentStatus
from payments.tests.factories import PaymentEventFactory, PaymentFactory
from rentals.tests.factories import fresh


# =============================================================================
# Payment Transitions
# =============================================================================


@pytest.mark.django_db
class TestPaymentTransitions:
    """Tests for Payment FSM transitions."""

    def test_defaults(self):
        payment = PaymentFactory()

        assert payment.status == PaymentStatus.PENDING
        assert payment.currency == "usd"
        assert payment.paid_at is None
        assert payment.amount == payment.charge.amount

    @freeze_time("2024-04-01 12:00:00")
    def test_mark_succeeded_stamps_paid_at(self):
        payment = PaymentFactory()

        payment.mark_succeeded()
        payment.save()
        payment = fresh(payment)

        assert payment.status == PaymentStatus.SUCCEEDED
        assert payment.paid_at == datetime(2024, 4, 1, 12, 0, tzinfo=timezone.utc)
        assert payment.is_succeeded is True

    def test_mark_succeeded_keeps_existing_paid_at(self):
        """A late success after a failure keeps the first confirmation time."""
        first = datetime(2024, 4, 1, 12, 0, tzinfo=timezone.utc)
        payment = PaymentFactory(status=PaymentStatus.FAILED, paid_at=first)

        payment.mark_succeeded()

        assert payment.paid_at == first

    def test_mark_failed_from_pending(self):
        payment = PaymentFactory()

        payment.mark_failed()
        payment.save()

        assert payment.status == PaymentStatus.FAILED

    def test_succeeded_is_terminal(self):
        payment = PaymentFactory(status=PaymentStatus.SUCCEEDED)

        with pytest.raises(TransitionNotAllowed):
            payment.mark_failed()
        with pytest.raises(TransitionNotAllowed):
            payment.mark_succeeded()

    def test_status_cannot_be_assigned_directly(self):
        payment = PaymentFactory()

        with pytest.raises(AttributeError):
            payment.status = PaymentStatus.SUCCEEDED

        assert fresh(payment).status == PaymentStatus.PENDING


# =============================================================================
# Constraints
# =============================================================================


@pytest.mark.django_db
class TestPaymentConstraints:
    """Tests for Payment database constraints."""

    def test_second_pending_payment_rejected(self):
        payment = PaymentFactory()

        with pytest.raises(IntegrityError), transaction.atomic():
            PaymentFactory(charge=payment.charge)

    def test_pending_allowed_after_failure(self):
        failed = PaymentFactory(status=PaymentStatus.FAILED)

        retry = PaymentFactory(charge=failed.charge)

        assert failed.charge.payments.count() == 2
        assert retry.status == PaymentStatus.PENDING

    def test_zero_amount_rejected(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            PaymentFactory(amount=0)


@pytest.mark.django_db
class TestPaymentEvent:
    """Tests for PaymentEvent."""

    def test_unique_per_provider_and_event_id(self):
        PaymentEventFactory(event_id="evt_dup")

        with pytest.raises(IntegrityError), transaction.atomic():
            PaymentEventFactory(event_id="evt_dup")

    def test_write_once(self):
        event = PaymentEventFactory()
        event.event_type = "changed"

        with pytest.raises(ValueError, match="write-once"):
            event.save()

    def test_get_object_id(self):
        event = PaymentEventFactory(
            payload={"id": "evt_1", "data": {"object": {"id": "cs_test_1"}}}
        )

        assert event.get_object_id() == "cs_test_1"

    def test_get_object_id_missing(self):
        event = PaymentEventFactory(payload={"id": "evt_1"})

        assert event.get_object_id() is None
