"""
Tests for CheckoutService.

Tests cover:
- Successful checkout: pending payment, provider parameters, redirect URL
- Authorization order: caller, charge status, in-flight payment
- Duplicate checkout protection
- Provider failure rolls everything back
"""

import uuid
from unittest.mock import patch

import pytest
from django.db.models.query import QuerySet

from payments.exceptions import (
    ChargeNotPayableError,
    DuplicateCheckoutError,
    PaymentNotFoundError,
    StripeAPIUnavailableError,
)
from payments.models import Payment
from payments.services import CheckoutService
from payments.state_machines import PaymentStatus
from payments.tests.factories import PaymentFactory
from rentals.models import ChargeStatus
from rentals.tests.factories import AdminFactory, ChargeFactory, fresh


# =============================================================================
# Success Path
# =============================================================================


@pytest.mark.django_db
class TestCreateCheckoutSession:
    """Tests for a checkout that goes through."""

    def test_creates_pending_payment_and_returns_url(
        self, tenant, due_charge, fake_provider
    ):
        result = CheckoutService.create_checkout_session(
            tenant, due_charge.id, provider=fake_provider
        )

        payment = Payment.objects.get()
        assert result.payment == payment
        assert result.url == "https://checkout.stripe.com/c/pay/cs_test_fake_1"
        assert payment.status == PaymentStatus.PENDING
        assert payment.charge == due_charge
        assert payment.amount == due_charge.amount
        assert payment.currency == "usd"
        assert payment.provider == "stripe"
        assert payment.provider_payment_id == "cs_test_fake_1"
        assert payment.paid_at is None

    def test_provider_receives_correlation_ids(self, tenant, due_charge, fake_provider):
        """The session carries the payment id so webhooks can find it."""
        result = CheckoutService.create_checkout_session(
            tenant, due_charge.id, provider=fake_provider
        )

        params = fake_provider.calls[0]
        payment_id = str(result.payment.id)
        assert params.client_reference_id == payment_id
        assert params.metadata == {
            "payment_id": payment_id,
            "charge_id": str(due_charge.id),
        }
        assert params.amount_cents == 120000
        assert params.currency == "usd"
        assert params.product_name == "Rent Payment"
        assert params.idempotency_key.startswith(f"checkout:{payment_id}:")

    def test_accepts_string_charge_id(self, tenant, due_charge, fake_provider):
        result = CheckoutService.create_checkout_session(
            tenant, str(due_charge.id), provider=fake_provider
        )

        assert result.payment.charge_id == due_charge.id

    def test_allowed_after_failed_payment(self, tenant, due_charge, fake_provider):
        PaymentFactory(charge=due_charge, status=PaymentStatus.FAILED)

        result = CheckoutService.create_checkout_session(
            tenant, due_charge.id, provider=fake_provider
        )

        assert result.payment.status == PaymentStatus.PENDING
        assert due_charge.payments.count() == 2

    def test_charge_status_is_untouched(self, tenant, due_charge, fake_provider):
        CheckoutService.create_checkout_session(
            tenant, due_charge.id, provider=fake_provider
        )

        due_charge = fresh(due_charge)
        assert due_charge.status == ChargeStatus.DUE


# =============================================================================
# Authorization
# =============================================================================


@pytest.mark.django_db
class TestCheckoutAuthorization:
    """Checks run in order: caller, charge status, in-flight payment."""

    def test_missing_charge_is_not_found(self, tenant, fake_provider):
        with pytest.raises(PaymentNotFoundError):
            CheckoutService.create_checkout_session(
                tenant, uuid.uuid4(), provider=fake_provider
            )

    def test_malformed_charge_id_is_not_found(self, tenant, fake_provider):
        with pytest.raises(PaymentNotFoundError):
            CheckoutService.create_checkout_session(
                tenant, "not-a-uuid", provider=fake_provider
            )

    def test_other_tenant_is_forbidden(self, other_tenant, due_charge, fake_provider):
        with pytest.raises(ChargeNotPayableError) as exc_info:
            CheckoutService.create_checkout_session(
                other_tenant, due_charge.id, provider=fake_provider
            )

        assert exc_info.value.message == "Not allowed to pay this charge"
        assert Payment.objects.count() == 0
        assert fake_provider.calls == []

    def test_admin_is_forbidden(self, admin, due_charge, fake_provider):
        with pytest.raises(ChargeNotPayableError):
            CheckoutService.create_checkout_session(
                admin, due_charge.id, provider=fake_provider
            )

    def test_user_with_admin_role_on_own_lease_is_forbidden(self, due_charge, fake_provider):
        """The role check applies even if the lease points at the user."""
        landlord = AdminFactory()
        due_charge.lease.tenant = landlord
        due_charge.lease.save()

        with pytest.raises(ChargeNotPayableError):
            CheckoutService.create_checkout_session(
                landlord, due_charge.id, provider=fake_provider
            )

    @pytest.mark.parametrize("status", [ChargeStatus.PAID, ChargeStatus.VOID])
    def test_non_due_charge_is_forbidden(self, tenant, lease, fake_provider, status):
        charge = ChargeFactory(lease=lease, status=status)

        with pytest.raises(ChargeNotPayableError) as exc_info:
            CheckoutService.create_checkout_session(
                tenant, charge.id, provider=fake_provider
            )

        assert exc_info.value.message == "Charge is not payable"
        assert Payment.objects.count() == 0

    def test_ownership_checked_before_status(self, other_tenant, lease, fake_provider):
        """Another tenant's paid charge reports the ownership failure."""
        charge = ChargeFactory(lease=lease, status=ChargeStatus.PAID)

        with pytest.raises(ChargeNotPayableError) as exc_info:
            CheckoutService.create_checkout_session(
                other_tenant, charge.id, provider=fake_provider
            )

        assert exc_info.value.message == "Not allowed to pay this charge"

    def test_status_checked_before_pending_payment(self, tenant, lease, fake_provider):
        charge = ChargeFactory(lease=lease, status=ChargeStatus.VOID)
        PaymentFactory(charge=charge)

        with pytest.raises(ChargeNotPayableError):
            CheckoutService.create_checkout_session(
                tenant, charge.id, provider=fake_provider
            )


# =============================================================================
# Duplicates
# =============================================================================


@pytest.mark.django_db
class TestDuplicateCheckout:
    def test_second_checkout_conflicts(self, tenant, due_charge, fake_provider):
        CheckoutService.create_checkout_session(
            tenant, due_charge.id, provider=fake_provider
        )

        with pytest.raises(DuplicateCheckoutError) as exc_info:
            CheckoutService.create_checkout_session(
                tenant, due_charge.id, provider=fake_provider
            )

        assert exc_info.value.error_code == "DUPLICATE_CHECKOUT"
        assert due_charge.payments.count() == 1
        assert len(fake_provider.calls) == 1

    def test_concurrent_pending_insert_conflicts(
        self, tenant, due_charge, fake_provider
    ):
        """A pending payment that lands after the check trips the unique index."""
        PaymentFactory(charge=due_charge)

        with patch.object(QuerySet, "exists", return_value=False):
            with pytest.raises(DuplicateCheckoutError) as exc_info:
                CheckoutService.create_checkout_session(
                    tenant, due_charge.id, provider=fake_provider
                )

        assert exc_info.value.error_code == "DUPLICATE_CHECKOUT"
        assert due_charge.payments.count() == 1
        assert fake_provider.calls == []


# =============================================================================
# Provider Failure
# =============================================================================


@pytest.mark.django_db
class TestProviderFailure:
    def test_provider_error_rolls_back_payment(self, tenant, due_charge, fake_provider):
        """No pending payment survives a failed provider call."""
        fake_provider.error = StripeAPIUnavailableError(
            "Could not connect to Stripe.", stripe_code="api_connection_error"
        )

        with pytest.raises(StripeAPIUnavailableError):
            CheckoutService.create_checkout_session(
                tenant, due_charge.id, provider=fake_provider
            )

        assert Payment.objects.count() == 0

    def test_retry_after_provider_error_succeeds(self, tenant, due_charge, fake_provider):
        fake_provider.error = StripeAPIUnavailableError("down")
        with pytest.raises(StripeAPIUnavailableError):
            CheckoutService.create_checkout_session(
                tenant, due_charge.id, provider=fake_provider
            )

        fake_provider.error = None
        result = CheckoutService.create_checkout_session(
            tenant, due_charge.id, provider=fake_provider
        )

        assert result.payment.status == PaymentStatus.PENDING
        assert Payment.objects.count() == 1
