"""
Rental services.

This module owns the lease-to-charge lifecycle:
- LeaseService: lease creation (with its seed charge), update and delete
- ChargeService: landlord-managed charges (create due/void, void)

Ownership is always expressed as a query predicate on the acting admin,
so a record that exists but belongs to another landlord is reported the
same way as one that does not exist (NotFoundError).

Charge status PAID is never written here; only the webhook reconciler
(payments.webhooks.handlers) moves a charge to paid.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

from dateutil.relativedelta import relativedelta
from django.contrib.auth import get_user_model
from django_fsm import TransitionNotAllowed

from authentication.models import UserRole
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.helpers import validate_uuid
from core.services import BaseService
from rentals.models import (
    DUE_DAY_MAX,
    DUE_DAY_MIN,
    Charge,
    ChargeStatus,
    Lease,
    Unit,
)

if TYPE_CHECKING:
    from authentication.models import User

MANUAL_CHARGE_STATUSES = (ChargeStatus.DUE, ChargeStatus.VOID)


def initial_due_date(start_date: date, due_day: int) -> date:
    """
    Compute the due date of a lease's first charge.

    The start date's day is replaced by due_day. If the lease starts after
    due_day in that month, the first charge falls due the following month.
    due_day is at most 28, so the day never overflows.

    Example:
        initial_due_date(date(2024, 3, 15), 1)   # 2024-04-01
        initial_due_date(date(2024, 3, 1), 15)   # 2024-03-15
        initial_due_date(date(2024, 1, 31), 28)  # 2024-02-28
    """
    due = start_date.replace(day=due_day)
    if start_date.day > due_day:
        due += relativedelta(months=1)
    return due


class LeaseService(BaseService):
    """
    Service for lease lifecycle.

    Methods:
        create_lease: Create a lease and its first due charge atomically
        update_lease: Change lease terms (existing charges are untouched)
        delete_lease: Remove a lease and its charges
        get_owned_lease: Fetch a lease scoped to its landlord
    """

    @staticmethod
    def owned_leases(admin: User):
        return Lease.objects.filter(unit__property__owner=admin)

    @classmethod
    def get_owned_lease(cls, admin: User, lease_id) -> Lease:
        """
        Return the lease if admin owns it.

        Raises:
            NotFoundError: Lease missing or owned by someone else
        """
        lease = None
        if validate_uuid(lease_id):
            lease = cls.owned_leases(admin).filter(id=lease_id).first()
        if lease is None:
            raise NotFoundError("Lease not found", error_code="LEASE_NOT_FOUND")
        return lease

    @classmethod
    def create_lease(cls, admin: User, data: dict[str, Any]) -> Lease:
        """
        Create a lease and seed its first charge in one transaction.

        Args:
            admin: Landlord performing the action
            data: unit_id, tenant_user_id, rent_amount, due_day,
                start_date and optional end_date

        Returns:
            The created Lease; its seed charge is lease.charges.get()

        Raises:
            NotFoundError: Unit missing or not owned by admin
            ValidationError: Tenant unknown or terms out of range
        """
        unit_id = data.get("unit_id")
        unit = None
        if validate_uuid(unit_id):
            unit = Unit.objects.filter(id=unit_id, property__owner=admin).first()
        if unit is None:
            raise NotFoundError(
                "Unit not found",
                error_code="UNIT_NOT_FOUND",
            )

        tenant = cls._resolve_tenant(data.get("tenant_user_id"))
        terms = cls._validate_terms(
            rent_amount=data.get("rent_amount"),
            due_day=data.get("due_day"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
        )

        with cls.atomic():
            lease = Lease.objects.create(unit=unit, tenant=tenant, **terms)
            charge = Charge.objects.create(
                lease=lease,
                amount=lease.rent_amount,
                due_date=initial_due_date(lease.start_date, lease.due_day),
                status=ChargeStatus.DUE,
            )

        cls.get_logger().info(
            "Lease created with seed charge",
            extra={
                "lease_id": str(lease.id),
                "charge_id": str(charge.id),
                "unit_id": str(unit.id),
                "tenant_id": str(tenant.id),
                "due_date": charge.due_date.isoformat(),
            },
        )
        return lease

    @classmethod
    def update_lease(cls, admin: User, lease_id, data: dict[str, Any]) -> Lease:
        """
        Apply a partial update to lease terms.

        Charges already issued keep their amount and due date.

        Raises:
            NotFoundError: Lease missing or not owned by admin
            ValidationError: Resulting terms out of range
        """
        with cls.atomic():
            lease = cls.get_owned_lease(admin, lease_id)
            terms = cls._validate_terms(
                rent_amount=data.get("rent_amount", lease.rent_amount),
                due_day=data.get("due_day", lease.due_day),
                start_date=data.get("start_date", lease.start_date),
                end_date=data.get("end_date", lease.end_date),
            )
            for field_name, value in terms.items():
                setattr(lease, field_name, value)
            lease.save()

        cls.get_logger().info("Lease updated", extra={"lease_id": str(lease.id)})
        return lease

    @classmethod
    def delete_lease(cls, admin: User, lease_id) -> None:
        lease = cls.get_owned_lease(admin, lease_id)
        lease_pk = str(lease.id)
        lease.delete()
        cls.get_logger().info("Lease deleted", extra={"lease_id": lease_pk})

    # ==========================================================================
    # Validation helpers
    # ==========================================================================

    @staticmethod
    def _resolve_tenant(tenant_user_id) -> User:
        User = get_user_model()
        tenant = None
        if validate_uuid(tenant_user_id):
            tenant = User.objects.filter(
                id=tenant_user_id, role=UserRole.TENANT
            ).first()
        if tenant is None:
            raise ValidationError(
                "Tenant not found",
                error_code="INVALID_TENANT",
                details={"tenant_user_id": ["Must reference an existing tenant."]},
            )
        return tenant

    @staticmethod
    def _validate_terms(rent_amount, due_day, start_date, end_date) -> dict[str, Any]:
        errors: dict[str, list[str]] = {}

        if not isinstance(rent_amount, int) or isinstance(rent_amount, bool) or rent_amount < 1:
            errors["rent_amount"] = ["Must be a positive integer amount in cents."]
        if (
            not isinstance(due_day, int)
            or isinstance(due_day, bool)
            or not DUE_DAY_MIN <= due_day <= DUE_DAY_MAX
        ):
            errors["due_day"] = [f"Must be between {DUE_DAY_MIN} and {DUE_DAY_MAX}."]
        if not isinstance(start_date, date):
            errors["start_date"] = ["A valid date is required."]
        if end_date is not None:
            if not isinstance(end_date, date):
                errors["end_date"] = ["Must be a valid date."]
            elif isinstance(start_date, date) and end_date < start_date:
                errors["end_date"] = ["Must be on or after start_date."]

        if errors:
            raise ValidationError(
                "Invalid lease terms",
                error_code="INVALID_LEASE_TERMS",
                details=errors,
            )

        return {
            "rent_amount": rent_amount,
            "due_day": due_day,
            "start_date": start_date,
            "end_date": end_date,
        }


class ChargeService(BaseService):
    """
    Service for landlord-managed charges.

    Methods:
        create_charge: Issue a due (or void) charge on an owned lease
        void_charge: Cancel a due charge
    """

    @staticmethod
    def owned_charges(admin: User):
        return Charge.objects.filter(lease__unit__property__owner=admin)

    @staticmethod
    def due_charges_for_tenant(tenant: User):
        """Outstanding charges for a tenant, soonest first."""
        return (
            Charge.objects.filter(lease__tenant=tenant, status=ChargeStatus.DUE)
            .select_related("lease__unit__property")
            .order_by("due_date")
        )

    @classmethod
    def create_charge(cls, admin: User, data: dict[str, Any]) -> Charge:
        """
        Create a charge on a lease owned by admin.

        Status defaults to due. Only due and void are accepted: a charge
        becomes paid exclusively through payment reconciliation.

        Raises:
            ValidationError: status is paid or unknown, or amount/due_date invalid
            NotFoundError: Lease missing or not owned by admin
        """
        status = data.get("status") or ChargeStatus.DUE
        if status not in MANUAL_CHARGE_STATUSES:
            raise ValidationError(
                "Charges can only be created as due or void",
                error_code="INVALID_CHARGE_STATUS",
                details={"status": ["Must be one of: due, void."]},
            )

        amount = data.get("amount")
        due_date = data.get("due_date")
        errors: dict[str, list[str]] = {}
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 1:
            errors["amount"] = ["Must be a positive integer amount in cents."]
        if not isinstance(due_date, date):
            errors["due_date"] = ["A valid date is required."]
        if errors:
            raise ValidationError(
                "Invalid charge",
                error_code="INVALID_CHARGE",
                details=errors,
            )

        lease = LeaseService.get_owned_lease(admin, data.get("lease_id"))
        charge = Charge.objects.create(
            lease=lease,
            amount=amount,
            due_date=due_date,
            status=status,
        )

        cls.get_logger().info(
            "Charge created",
            extra={
                "charge_id": str(charge.id),
                "lease_id": str(lease.id),
                "status": charge.status,
            },
        )
        return charge

    @classmethod
    def void_charge(cls, admin: User, charge_id) -> Charge:
        """
        Void a due charge.

        Raises:
            NotFoundError: Charge missing or not owned by admin
            ConflictError: Charge is not due
        """
        with cls.atomic():
            charge = None
            if validate_uuid(charge_id):
                charge = (
                    cls.owned_charges(admin)
                    .select_for_update()
                    .filter(id=charge_id)
                    .first()
                )
            if charge is None:
                raise NotFoundError("Charge not found", error_code="CHARGE_NOT_FOUND")

            try:
                charge.void()
            except TransitionNotAllowed as e:
                raise ConflictError(
                    f"Cannot void a {charge.status} charge",
                    error_code="INVALID_STATE_TRANSITION",
                    details={"current_status": charge.status, "action": "void"},
                ) from e
            charge.save(update_fields=["status", "updated_at"])

        cls.get_logger().info("Charge voided", extra={"charge_id": str(charge.id)})
        return charge
