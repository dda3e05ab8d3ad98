"""
DRF views for payments app.

This module provides API views for:
- Checkout session creation
- Tenant payment history

Related files:
    - services/: CheckoutService
    - serializers.py: Request/response serializers
    - webhooks/views.py: Stripe webhook endpoint
    - urls.py: URL routing

Endpoints:
    POST /api/v1/payments/checkout/ - Create checkout session (tenant)
    GET /api/v1/payments/tenant/payments/ - List own payments (tenant)

Security:
    - All endpoints require an authenticated tenant
    - Whether the tenant may pay a given charge is decided by CheckoutService
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import BaseApplicationError
from core.views import error_response
from payments.models import Payment
from payments.serializers import (
    CheckoutRequestSerializer,
    CheckoutResponseSerializer,
    PaymentSerializer,
)
from payments.services import CheckoutService
from rentals.permissions import IsTenantRole

logger = logging.getLogger(__name__)


class CheckoutView(APIView):
    """
    Create a Stripe Checkout session for a due charge.

    POST /api/v1/payments/checkout/

    Request body:
        {"charge_id": "<uuid>"}

    Returns:
        201 {"url": "https://checkout.stripe.com/...", "payment_id": "<uuid>"}
        403 caller may not pay this charge, or it is not due
        404 charge not found
        409 a checkout is already in progress
        502 payment provider failure
    """

    permission_classes = [IsAuthenticated, IsTenantRole]

    @extend_schema(
        summary="Start checkout",
        request=CheckoutRequestSerializer,
        responses={201: CheckoutResponseSerializer},
        tags=["Payments"],
    )
    def post(self, request):
        serializer = CheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = CheckoutService.create_checkout_session(
                request.user,
                serializer.validated_data["charge_id"],
            )
        except BaseApplicationError as e:
            return error_response(e)

        return Response(
            {"url": result.url, "payment_id": str(result.payment.id)},
            status=status.HTTP_201_CREATED,
        )


class TenantPaymentListView(generics.ListAPIView):
    """
    Payment history for the requesting tenant.

    GET /api/v1/payments/tenant/payments/
    """

    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, IsTenantRole]

    @extend_schema(summary="List my payments", tags=["Payments"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return (
            Payment.objects.filter(charge__lease__tenant=self.request.user)
            .select_related("charge")
            .order_by("-created_at")
        )
