"""
DRF serializers for payments app.

This module provides serializers for:
- Checkout session requests and responses
- Tenant payment history

Related files:
    - models/: Payment
    - views.py: Payment API views

Usage:
    serializer = CheckoutRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = CheckoutService.create_checkout_session(
        request.user, serializer.validated_data["charge_id"]
    )
"""

from __future__ import annotations

from rest_framework import serializers

from payments.models import Payment


class CheckoutRequestSerializer(serializers.Serializer):
    """
    Serializer for checkout session creation.

    Fields:
        charge_id: Charge the tenant wants to pay
    """

    charge_id = serializers.UUIDField(
        help_text="ID of a due charge on one of the caller's leases",
    )


class CheckoutResponseSerializer(serializers.Serializer):
    url = serializers.URLField(help_text="Hosted checkout page to redirect to")
    payment_id = serializers.UUIDField(help_text="Pending payment created for this checkout")


class PaymentSerializer(serializers.ModelSerializer):
    """
    Payment serializer for tenant payment history.

    Amounts are integer cents; currency is always usd.
    """

    charge_id = serializers.UUIDField(source="charge.id", read_only=True)
    due_date = serializers.DateField(source="charge.due_date", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "charge_id",
            "due_date",
            "provider",
            "status",
            "amount",
            "currency",
            "paid_at",
            "created_at",
        ]
        read_only_fields = fields
