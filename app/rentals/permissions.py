"""
Role-based permission classes for the rental API.

- IsAdminRole: landlord endpoints (properties, units, leases, charges)
- IsTenantRole: tenant endpoints (outstanding charges, checkout, history)

Record ownership is not checked here; querysets and services filter by
the acting user, so foreign records surface as 404.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsAdminRole(permissions.BasePermission):
    """Allows access only to users with the admin (landlord) role."""

    message = "Landlord access required."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin_role)


class IsTenantRole(permissions.BasePermission):
    """Allows access only to users with the tenant role."""

    message = "Tenant access required."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_tenant_role)
