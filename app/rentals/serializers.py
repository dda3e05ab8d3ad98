"""
Serializers for the rental API.

Read and write serializers are separate where the write shape differs:
    PropertySerializer / UnitSerializer: owner-scoped CRUD
    LeaseSerializer: read shape, includes charges
    LeaseCreateSerializer / LeaseUpdateSerializer: request validation
    ChargeSerializer: read shape
    ChargeCreateSerializer: manual charge request (status due/void only)
    TenantSerializer: tenant directory entries

Request serializers validate shape and ranges; ownership and business
rules live in rentals.services.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from rentals.models import (
    DUE_DAY_MAX,
    DUE_DAY_MIN,
    Charge,
    ChargeStatus,
    Lease,
    Property,
    Unit,
)

User = get_user_model()


class PropertySerializer(serializers.ModelSerializer):
    class Meta:
        model = Property
        fields = [
            "id",
            "name",
            "address_line1",
            "city",
            "state",
            "postal_code",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class UnitSerializer(serializers.ModelSerializer):
    """Unit with its property id. The view resolves the id against the owner's properties."""

    property_id = serializers.UUIDField()

    class Meta:
        model = Unit
        fields = ["id", "property_id", "name", "notes", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class ChargeSerializer(serializers.ModelSerializer):
    lease_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Charge
        fields = ["id", "lease_id", "amount", "due_date", "status", "created_at"]
        read_only_fields = fields


class TenantChargeSerializer(ChargeSerializer):
    """Charge with the unit it belongs to, for the tenant dashboard."""

    unit_name = serializers.CharField(source="lease.unit.name", read_only=True)
    property_name = serializers.CharField(
        source="lease.unit.property.name", read_only=True
    )

    class Meta(ChargeSerializer.Meta):
        fields = ChargeSerializer.Meta.fields + ["unit_name", "property_name"]
        read_only_fields = fields


class ChargeCreateSerializer(serializers.Serializer):
    """
    Manual charge request.

    status accepts due or void; paid is rejected here and again in
    ChargeService.create_charge.
    """

    lease_id = serializers.UUIDField()
    amount = serializers.IntegerField(min_value=1)
    due_date = serializers.DateField()
    status = serializers.ChoiceField(
        choices=[ChargeStatus.DUE, ChargeStatus.VOID],
        required=False,
        allow_null=True,
    )


class LeaseSerializer(serializers.ModelSerializer):
    unit_id = serializers.UUIDField(read_only=True)
    tenant_user_id = serializers.UUIDField(source="tenant_id", read_only=True)
    charges = ChargeSerializer(many=True, read_only=True)

    class Meta:
        model = Lease
        fields = [
            "id",
            "unit_id",
            "tenant_user_id",
            "rent_amount",
            "due_day",
            "start_date",
            "end_date",
            "charges",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class LeaseCreateSerializer(serializers.Serializer):
    unit_id = serializers.UUIDField()
    tenant_user_id = serializers.UUIDField()
    rent_amount = serializers.IntegerField(min_value=1)
    due_day = serializers.IntegerField(min_value=DUE_DAY_MIN, max_value=DUE_DAY_MAX)
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        end_date = attrs.get("end_date")
        if end_date is not None and end_date < attrs["start_date"]:
            raise serializers.ValidationError(
                {"end_date": "Must be on or after start_date."}
            )
        return attrs


class LeaseUpdateSerializer(serializers.Serializer):
    rent_amount = serializers.IntegerField(min_value=1, required=False)
    due_day = serializers.IntegerField(
        min_value=DUE_DAY_MIN, max_value=DUE_DAY_MAX, required=False
    )
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False, allow_null=True)


class TenantSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "name"]
        read_only_fields = fields
