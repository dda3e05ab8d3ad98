"""
Views for the rental API.

URL Structure:
    /api/v1/rentals/properties/                 GET, POST (admin)
    /api/v1/rentals/properties/{id}/            GET, PATCH, DELETE (admin)
    /api/v1/rentals/units/                      GET, POST (admin)
    /api/v1/rentals/units/{id}/                 GET, PATCH, DELETE (admin)
    /api/v1/rentals/leases/                     GET, POST (admin)
    /api/v1/rentals/leases/{id}/                GET, PATCH, DELETE (admin)
    /api/v1/rentals/admin/charges/              GET, POST (admin)
    /api/v1/rentals/admin/charges/{id}/void/    POST (admin)
    /api/v1/rentals/admin/tenants/              GET (admin)
    /api/v1/rentals/tenant/charges/             GET (tenant)

Design Decisions:
    - Querysets are always filtered by the requesting landlord or tenant
    - Lease and charge writes go through rentals.services
    - Application errors are rendered by core.views.error_response
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import generics, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import BaseApplicationError
from core.views import error_response
from rentals.models import Property, Unit
from rentals.permissions import IsAdminRole, IsTenantRole
from rentals.serializers import (
    ChargeCreateSerializer,
    ChargeSerializer,
    LeaseCreateSerializer,
    LeaseSerializer,
    LeaseUpdateSerializer,
    PropertySerializer,
    TenantChargeSerializer,
    TenantSerializer,
    UnitSerializer,
)
from rentals.services import ChargeService, LeaseService

User = get_user_model()

ADMIN_PERMISSIONS = [IsAuthenticated, IsAdminRole]


@extend_schema_view(
    list=extend_schema(summary="List properties", tags=["Rentals - Properties"]),
    create=extend_schema(summary="Create property", tags=["Rentals - Properties"]),
    retrieve=extend_schema(summary="Get property", tags=["Rentals - Properties"]),
    partial_update=extend_schema(summary="Update property", tags=["Rentals - Properties"]),
    destroy=extend_schema(summary="Delete property", tags=["Rentals - Properties"]),
)
class PropertyViewSet(viewsets.ModelViewSet):
    """Properties owned by the requesting landlord."""

    serializer_class = PropertySerializer
    permission_classes = ADMIN_PERMISSIONS
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return Property.objects.filter(owner=self.request.user).order_by("-created_at")

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)


@extend_schema_view(
    list=extend_schema(summary="List units", tags=["Rentals - Units"]),
    create=extend_schema(summary="Create unit", tags=["Rentals - Units"]),
    retrieve=extend_schema(summary="Get unit", tags=["Rentals - Units"]),
    partial_update=extend_schema(summary="Update unit", tags=["Rentals - Units"]),
    destroy=extend_schema(summary="Delete unit", tags=["Rentals - Units"]),
)
class UnitViewSet(viewsets.ModelViewSet):
    """Units on properties owned by the requesting landlord."""

    serializer_class = UnitSerializer
    permission_classes = ADMIN_PERMISSIONS
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return (
            Unit.objects.filter(property__owner=self.request.user)
            .select_related("property")
            .order_by("-created_at")
        )

    def _save_with_owned_property(self, serializer):
        # Unknown and foreign property ids are both reported as 404
        property_id = serializer.validated_data.pop("property_id", None)
        if property_id is None:
            serializer.save()
            return
        prop = Property.objects.filter(id=property_id, owner=self.request.user).first()
        if prop is None:
            raise NotFound("Property not found")
        serializer.save(property=prop)

    def perform_create(self, serializer):
        self._save_with_owned_property(serializer)

    def perform_update(self, serializer):
        self._save_with_owned_property(serializer)


@extend_schema_view(
    list=extend_schema(summary="List leases", tags=["Rentals - Leases"]),
    retrieve=extend_schema(summary="Get lease", tags=["Rentals - Leases"]),
)
class LeaseViewSet(viewsets.ModelViewSet):
    """
    Leases on units owned by the requesting landlord.

    create:
        Create a lease and its first due charge. The charge falls due on
        due_day of the start month, or of the next month when the lease
        starts after due_day.
    """

    serializer_class = LeaseSerializer
    permission_classes = ADMIN_PERMISSIONS
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return (
            LeaseService.owned_leases(self.request.user)
            .select_related("unit", "tenant")
            .prefetch_related("charges")
            .order_by("-created_at")
        )

    @extend_schema(
        summary="Create lease",
        tags=["Rentals - Leases"],
        request=LeaseCreateSerializer,
        responses={201: LeaseSerializer},
    )
    def create(self, request):
        serializer = LeaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            lease = LeaseService.create_lease(request.user, serializer.validated_data)
        except BaseApplicationError as e:
            return error_response(e)

        return Response(LeaseSerializer(lease).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Update lease",
        tags=["Rentals - Leases"],
        request=LeaseUpdateSerializer,
        responses={200: LeaseSerializer},
    )
    def partial_update(self, request, pk=None):
        serializer = LeaseUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            lease = LeaseService.update_lease(request.user, pk, serializer.validated_data)
        except BaseApplicationError as e:
            return error_response(e)

        return Response(LeaseSerializer(lease).data)

    @extend_schema(summary="Delete lease", tags=["Rentals - Leases"])
    def destroy(self, request, pk=None):
        try:
            LeaseService.delete_lease(request.user, pk)
        except BaseApplicationError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(summary="List charges", tags=["Rentals - Charges"]),
)
class AdminChargeViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Charges on leases owned by the requesting landlord.

    create:
        Issue a manual charge. status may be due (default) or void;
        paid is rejected because only payment reconciliation settles charges.

    void:
        Cancel a due charge.
    """

    serializer_class = ChargeSerializer
    permission_classes = ADMIN_PERMISSIONS

    def get_queryset(self):
        return ChargeService.owned_charges(self.request.user).order_by(
            "-due_date", "-created_at"
        )

    @extend_schema(
        summary="Create charge",
        tags=["Rentals - Charges"],
        request=ChargeCreateSerializer,
        responses={201: ChargeSerializer},
    )
    def create(self, request):
        serializer = ChargeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            charge = ChargeService.create_charge(request.user, serializer.validated_data)
        except BaseApplicationError as e:
            return error_response(e)

        return Response(ChargeSerializer(charge).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Void charge",
        tags=["Rentals - Charges"],
        request=None,
        responses={200: ChargeSerializer},
    )
    @action(detail=True, methods=["post"])
    def void(self, request, pk=None):
        try:
            charge = ChargeService.void_charge(request.user, pk)
        except BaseApplicationError as e:
            return error_response(e)
        return Response(ChargeSerializer(charge).data)


@extend_schema(summary="List tenants", tags=["Rentals - Tenants"])
class AdminTenantListView(generics.ListAPIView):
    """Tenant directory used when creating leases."""

    serializer_class = TenantSerializer
    permission_classes = ADMIN_PERMISSIONS

    def get_queryset(self):
        return User.objects.tenants().order_by("email")


@extend_schema(summary="List my due charges", tags=["Rentals - Tenant"])
class TenantChargeListView(generics.ListAPIView):
    """Outstanding (due) charges for the requesting tenant, soonest first."""

    serializer_class = TenantChargeSerializer
    permission_classes = [IsAuthenticated, IsTenantRole]

    def get_queryset(self):
        return ChargeService.due_charges_for_tenant(self.request.user)
