"""
URL configuration for the rental API.

All URLs are prefixed with /api/v1/rentals/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from rentals.views import (
    AdminChargeViewSet,
    AdminTenantListView,
    LeaseViewSet,
    PropertyViewSet,
    TenantChargeListView,
    UnitViewSet,
)

router = DefaultRouter()
router.register(r"properties", PropertyViewSet, basename="property")
router.register(r"units", UnitViewSet, basename="unit")
router.register(r"leases", LeaseViewSet, basename="lease")
router.register(r"admin/charges", AdminChargeViewSet, basename="admin-charge")

app_name = "rentals"

urlpatterns = [
    path("", include(router.urls)),
    path("admin/tenants/", AdminTenantListView.as_view(), name="admin-tenant-list"),
    path("tenant/charges/", TenantChargeListView.as_view(), name="tenant-charge-list"),
]
