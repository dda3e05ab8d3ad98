"""
Pytest fixtures shared by all payment tests (services, webhooks, views).

Fixtures provide a tenant with a due charge on their lease and a fake
payment provider, so checkout and reconciliation run without Stripe.

Usage:
    def test_checkout(tenant, due_charge, fake_provider):
        result = CheckoutService.create_checkout_session(
            tenant, due_charge.id, provider=fake_provider
        )
"""

import pytest
from rest_framework.test import APIClient

from payments.adapters import CheckoutSessionResult
from rentals.tests.factories import (
    AdminFactory,
    ChargeFactory,
    LeaseFactory,
    PropertyFactory,
    TenantFactory,
    UnitFactory,
)


# =============================================================================
# Fake Provider
# =============================================================================


class FakeCheckoutProvider:
    """
    In-memory PaymentProvider.

    Records every CheckoutSessionParams it receives. Set `error` to make
    the next call raise it.
    """

    def __init__(self):
        self.calls = []
        self.error = None

    def create_checkout_session(self, params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        n = len(self.calls)
        return CheckoutSessionResult(
            id=f"cs_test_fake_{n}",
            url=f"https://checkout.stripe.com/c/pay/cs_test_fake_{n}",
        )


@pytest.fixture
def fake_provider():
    return FakeCheckoutProvider()


# =============================================================================
# Rental Fixtures
# =============================================================================


@pytest.fixture
def admin(db):
    return AdminFactory()


@pytest.fixture
def tenant(db):
    return TenantFactory()


@pytest.fixture
def other_tenant(db):
    return TenantFactory()


@pytest.fixture
def lease(admin, tenant):
    """A lease on admin's unit for tenant."""
    unit = UnitFactory(property=PropertyFactory(owner=admin))
    return LeaseFactory(unit=unit, tenant=tenant, rent_amount=120000)


@pytest.fixture
def due_charge(lease):
    return ChargeFactory(lease=lease, amount=lease.rent_amount)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def tenant_client(tenant):
    client = APIClient()
    client.force_authenticate(user=tenant)
    return client


@pytest.fixture
def admin_client(admin):
    client = APIClient()
    client.force_authenticate(user=admin)
    return client
