"""
URL configuration for the RentPay backend.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/rentals/               - Landlord and tenant rental endpoints
        properties/                - Property list/create (admin)
        properties/{id}/           - Property detail/update/delete (admin)
        units/                     - Unit list/create (admin)
        units/{id}/                - Unit detail/update/delete (admin)
        leases/                    - Lease list/create (admin)
        leases/{id}/               - Lease detail/update/delete (admin)
        admin/charges/             - Charge list/create (admin)
        admin/charges/{id}/void/   - Void a due charge (admin)
        admin/tenants/             - Tenant directory (admin)
        tenant/charges/            - Outstanding charges (tenant)
    /api/v1/payments/              - Payment endpoints
        checkout/                  - Start a hosted checkout (tenant)
        tenant/payments/           - Payment history (tenant)
        webhooks/stripe/           - Stripe webhook endpoint (POST)
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("rentals/", include("rentals.urls")),
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "RentPay Admin"
admin.site.site_title = "RentPay"
admin.site.index_title = "Property management"
