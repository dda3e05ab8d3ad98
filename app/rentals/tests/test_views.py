"""
Tests for the rental API.

Tests cover:
- Role enforcement (admin vs tenant endpoints)
- Owner scoping of properties, units, leases and charges
- Lease creation boundary validation
- Manual charge creation and voiding
- Tenant outstanding charges
"""

import uuid
from datetime import date

import pytest

from rentals.models import ChargeStatus, Lease, Unit
from rentals.tests.factories import (
    ChargeFactory,
    LeaseFactory,
    PropertyFactory,
    TenantFactory,
    UnitFactory,
)

BASE = "/api/v1/rentals"


def results(response):
    return response.json()["results"]


# =============================================================================
# Authentication / Roles
# =============================================================================


@pytest.mark.django_db
class TestRoles:
    """Admin endpoints reject tenants and vice versa."""

    def test_anonymous_rejected(self, api_client):
        response = api_client.get(f"{BASE}/properties/")

        assert response.status_code == 401

    @pytest.mark.parametrize(
        "path",
        ["properties/", "units/", "leases/", "admin/charges/", "admin/tenants/"],
    )
    def test_tenant_cannot_use_admin_endpoints(self, tenant_client, path):
        response = tenant_client.get(f"{BASE}/{path}")

        assert response.status_code == 403

    def test_admin_cannot_use_tenant_endpoints(self, admin_client):
        response = admin_client.get(f"{BASE}/tenant/charges/")

        assert response.status_code == 403


# =============================================================================
# Properties & Units
# =============================================================================


@pytest.mark.django_db
class TestPropertyEndpoints:
    def test_create_sets_owner(self, admin_client, admin):
        response = admin_client.post(
            f"{BASE}/properties/",
            {
                "name": "Maple Court",
                "address_line1": "1 Maple St",
                "city": "Springfield",
                "state": "IL",
                "postal_code": "62701",
            },
            format="json",
        )

        assert response.status_code == 201
        assert admin.properties.get().name == "Maple Court"

    def test_list_only_own(self, admin_client, rental_property, other_admin):
        PropertyFactory(owner=other_admin)

        response = admin_client.get(f"{BASE}/properties/")

        assert response.status_code == 200
        assert [p["id"] for p in results(response)] == [str(rental_property.id)]

    def test_foreign_property_detail_is_404(self, admin_client, other_admin):
        foreign = PropertyFactory(owner=other_admin)

        response = admin_client.get(f"{BASE}/properties/{foreign.id}/")

        assert response.status_code == 404

    def test_put_not_allowed(self, admin_client, rental_property):
        response = admin_client.put(
            f"{BASE}/properties/{rental_property.id}/", {}, format="json"
        )

        assert response.status_code == 405


@pytest.mark.django_db
class TestUnitEndpoints:
    def test_create_on_own_property(self, admin_client, rental_property):
        response = admin_client.post(
            f"{BASE}/units/",
            {"property_id": str(rental_property.id), "name": "2B"},
            format="json",
        )

        assert response.status_code == 201
        assert rental_property.units.get().name == "2B"

    def test_create_on_foreign_property_is_404(self, admin_client, other_admin):
        foreign = PropertyFactory(owner=other_admin)

        response = admin_client.post(
            f"{BASE}/units/",
            {"property_id": str(foreign.id), "name": "2B"},
            format="json",
        )

        assert response.status_code == 404
        assert not Unit.objects.filter(property=foreign).exists()

    def test_create_on_unknown_property_is_404(self, admin_client):
        response = admin_client.post(
            f"{BASE}/units/",
            {"property_id": str(uuid.uuid4()), "name": "2B"},
            format="json",
        )

        assert response.status_code == 404
        assert not Unit.objects.exists()

    def test_move_to_foreign_property_is_404(self, admin_client, unit, other_admin):
        foreign = PropertyFactory(owner=other_admin)

        response = admin_client.patch(
            f"{BASE}/units/{unit.id}/",
            {"property_id": str(foreign.id)},
            format="json",
        )

        assert response.status_code == 404
        unit.refresh_from_db()
        assert unit.property_id != foreign.id

    def test_rename_keeps_property(self, admin_client, unit):
        response = admin_client.patch(
            f"{BASE}/units/{unit.id}/", {"name": "3C"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["property_id"] == str(unit.property_id)
        unit.refresh_from_db()
        assert unit.name == "3C"

    def test_list_only_own(self, admin_client, unit, other_admin):
        UnitFactory(property=PropertyFactory(owner=other_admin))

        response = admin_client.get(f"{BASE}/units/")

        assert [u["id"] for u in results(response)] == [str(unit.id)]


# =============================================================================
# Leases
# =============================================================================


@pytest.mark.django_db
class TestLeaseCreate:
    """Tests for POST /rentals/leases/."""

    def payload(self, unit, tenant, **overrides):
        data = {
            "unit_id": str(unit.id),
            "tenant_user_id": str(tenant.id),
            "rent_amount": 120000,
            "due_day": 1,
            "start_date": "2024-03-15",
        }
        data.update(overrides)
        return data

    def test_creates_lease_and_seed_charge(self, admin_client, unit, tenant):
        response = admin_client.post(
            f"{BASE}/leases/", self.payload(unit, tenant), format="json"
        )

        assert response.status_code == 201
        body = response.json()
        assert body["rent_amount"] == 120000
        assert body["tenant_user_id"] == str(tenant.id)
        assert len(body["charges"]) == 1
        assert body["charges"][0]["due_date"] == "2024-04-01"
        assert body["charges"][0]["status"] == "due"

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"due_day": 29}, "due_day"),
            ({"due_day": 0}, "due_day"),
            ({"rent_amount": 0}, "rent_amount"),
            ({"end_date": "2024-03-01"}, "end_date"),
            ({"start_date": "not-a-date"}, "start_date"),
        ],
    )
    def test_invalid_payload_is_400(self, admin_client, unit, tenant, overrides, field):
        response = admin_client.post(
            f"{BASE}/leases/", self.payload(unit, tenant, **overrides), format="json"
        )

        assert response.status_code == 400
        assert field in response.json()
        assert Lease.objects.count() == 0

    def test_foreign_unit_is_404(self, other_admin, tenant, unit):
        from rest_framework.test import APIClient

        client = APIClient()
        client.force_authenticate(user=other_admin)

        response = client.post(
            f"{BASE}/leases/", self.payload(unit, tenant), format="json"
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "UNIT_NOT_FOUND"

    def test_non_tenant_user_is_400(self, admin_client, unit, admin):
        response = admin_client.post(
            f"{BASE}/leases/", self.payload(unit, admin), format="json"
        )

        assert response.status_code == 400
        assert "tenant_user_id" in response.json()["details"]


@pytest.mark.django_db
class TestLeaseDetail:
    def test_partial_update(self, admin_client, unit):
        lease = LeaseFactory(unit=unit)

        response = admin_client.patch(
            f"{BASE}/leases/{lease.id}/", {"rent_amount": 99000}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["rent_amount"] == 99000

    def test_delete(self, admin_client, unit):
        lease = LeaseFactory(unit=unit)

        response = admin_client.delete(f"{BASE}/leases/{lease.id}/")

        assert response.status_code == 204
        assert not Lease.objects.filter(id=lease.id).exists()

    def test_foreign_lease_is_404(self, admin_client, other_admin):
        lease = LeaseFactory(unit=UnitFactory(property=PropertyFactory(owner=other_admin)))

        assert admin_client.get(f"{BASE}/leases/{lease.id}/").status_code == 404
        assert (
            admin_client.patch(
                f"{BASE}/leases/{lease.id}/", {"due_day": 2}, format="json"
            ).status_code
            == 404
        )
        assert admin_client.delete(f"{BASE}/leases/{lease.id}/").status_code == 404


# =============================================================================
# Charges
# =============================================================================


@pytest.mark.django_db
class TestAdminCharges:
    """Tests for /rentals/admin/charges/."""

    def test_list_newest_due_first(self, admin_client, unit):
        lease = LeaseFactory(unit=unit)
        older = ChargeFactory(lease=lease, due_date=date(2024, 4, 1))
        newer = ChargeFactory(lease=lease, due_date=date(2024, 5, 1))
        ChargeFactory()

        response = admin_client.get(f"{BASE}/admin/charges/")

        assert [c["id"] for c in results(response)] == [str(newer.id), str(older.id)]

    def test_create_due_charge(self, admin_client, unit):
        lease = LeaseFactory(unit=unit)

        response = admin_client.post(
            f"{BASE}/admin/charges/",
            {"lease_id": str(lease.id), "amount": 2500, "due_date": "2024-05-01"},
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["status"] == "due"

    def test_create_paid_charge_is_400(self, admin_client, unit):
        lease = LeaseFactory(unit=unit)

        response = admin_client.post(
            f"{BASE}/admin/charges/",
            {
                "lease_id": str(lease.id),
                "amount": 2500,
                "due_date": "2024-05-01",
                "status": "paid",
            },
            format="json",
        )

        assert response.status_code == 400
        assert not lease.charges.exists()

    def test_void(self, admin_client, unit):
        charge = ChargeFactory(lease=LeaseFactory(unit=unit))

        response = admin_client.post(f"{BASE}/admin/charges/{charge.id}/void/")

        assert response.status_code == 200
        assert response.json()["status"] == "void"

    def test_void_paid_is_409(self, admin_client, unit):
        charge = ChargeFactory(lease=LeaseFactory(unit=unit), status=ChargeStatus.PAID)

        response = admin_client.post(f"{BASE}/admin/charges/{charge.id}/void/")

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATE_TRANSITION"

    def test_void_foreign_is_404(self, admin_client):
        charge = ChargeFactory()

        response = admin_client.post(f"{BASE}/admin/charges/{charge.id}/void/")

        assert response.status_code == 404


@pytest.mark.django_db
class TestAdminTenants:
    def test_lists_tenants_only(self, admin_client, tenant):
        response = admin_client.get(f"{BASE}/admin/tenants/")

        assert [t["id"] for t in results(response)] == [str(tenant.id)]


@pytest.mark.django_db
class TestTenantCharges:
    """Tests for GET /rentals/tenant/charges/."""

    def test_lists_own_due_charges_soonest_first(self, tenant_client, tenant):
        lease = LeaseFactory(tenant=tenant)
        later = ChargeFactory(lease=lease, due_date=date(2024, 6, 1))
        sooner = ChargeFactory(lease=lease, due_date=date(2024, 5, 1))
        ChargeFactory(lease=lease, status=ChargeStatus.VOID)
        ChargeFactory(lease=LeaseFactory(tenant=TenantFactory()))

        response = tenant_client.get(f"{BASE}/tenant/charges/")

        assert response.status_code == 200
        body = results(response)
        assert [c["id"] for c in body] == [str(sooner.id), str(later.id)]
        assert body[0]["unit_name"] == lease.unit.name
        assert body[0]["property_name"] == lease.unit.property.name
