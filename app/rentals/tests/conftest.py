"""
Pytest fixtures for rental tests.

Usage:
    def test_create_lease(admin, tenant, unit):
        lease = LeaseService.create_lease(admin, {...})
"""

import pytest
from rest_framework.test import APIClient

from rentals.tests.factories import (
    AdminFactory,
    PropertyFactory,
    TenantFactory,
    UnitFactory,
)


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def admin(db):
    """A landlord."""
    return AdminFactory()


@pytest.fixture
def other_admin(db):
    """A second landlord who owns nothing of admin's."""
    return AdminFactory()


@pytest.fixture
def tenant(db):
    return TenantFactory()


# =============================================================================
# Rental Fixtures
# =============================================================================


@pytest.fixture
def rental_property(admin):
    """A property owned by admin."""
    return PropertyFactory(owner=admin)


@pytest.fixture
def unit(rental_property):
    """A unit on admin's property."""
    return UnitFactory(property=rental_property)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def admin_client(admin):
    client = APIClient()
    client.force_authenticate(user=admin)
    return client


@pytest.fixture
def tenant_client(tenant):
    client = APIClient()
    client.force_authenticate(user=tenant)
    return client
