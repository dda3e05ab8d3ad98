"""
Rental domain models.

Ownership chain:
    User (admin) -> Property -> Unit -> Lease -> Charge

Every landlord-facing query filters on ``property__owner`` (or the
equivalent path from the model at hand), so ownership is a query
predicate rather than a post-fetch check.

Usage:
    from rentals.models import Charge, ChargeStatus

    outstanding = Charge.objects.filter(
        lease__tenant=tenant, status=ChargeStatus.DUE
    ).order_by("due_date")

    # Reconciler-only transition
    charge.mark_paid()
    charge.save()
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

DUE_DAY_MIN = 1
DUE_DAY_MAX = 28


class ChargeStatus(models.TextChoices):
    """
    States for the Charge lifecycle.

    State Flow:
        DUE -> PAID (webhook reconciliation only)
        DUE -> VOID (landlord action)
    """

    DUE = "due", "Due"
    PAID = "paid", "Paid"
    VOID = "void", "Void"


class Property(UUIDPrimaryKeyMixin, BaseModel):
    """A building or lot owned by a landlord."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
        help_text="Landlord who owns this property",
    )
    name = models.CharField(max_length=255)
    address_line1 = models.CharField(max_length=255)
    city = models.CharField(max_length=255)
    state = models.CharField(max_length=50)
    postal_code = models.CharField(max_length=20)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "properties"

    def __str__(self) -> str:
        return self.name


class Unit(UUIDPrimaryKeyMixin, BaseModel):
    """A rentable unit inside a property."""

    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="units",
    )
    name = models.CharField(max_length=255)
    notes = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.property.name} / {self.name}"


class Lease(UUIDPrimaryKeyMixin, BaseModel):
    """
    Agreement binding a tenant to a unit for a rent amount.

    Fields:
        rent_amount: Monthly rent in cents
        due_day: Day of month rent is due (1-28, so every month has it)
        start_date/end_date: Lease term; end_date is optional
    """

    unit = models.ForeignKey(
        Unit,
        on_delete=models.CASCADE,
        related_name="leases",
    )
    tenant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="leases",
        help_text="Tenant responsible for the charges on this lease",
    )
    rent_amount = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Monthly rent in cents",
    )
    due_day = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(DUE_DAY_MIN), MaxValueValidator(DUE_DAY_MAX)],
        help_text="Day of month rent is due (1-28)",
    )
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "start_date"], name="lease_tenant_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rent_amount__gt=0),
                name="lease_rent_amount_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(due_day__gte=DUE_DAY_MIN, due_day__lte=DUE_DAY_MAX),
                name="lease_due_day_range",
            ),
            models.CheckConstraint(
                condition=models.Q(end_date__isnull=True)
                | models.Q(end_date__gte=models.F("start_date")),
                name="lease_end_after_start",
            ),
        ]

    def __str__(self) -> str:
        return f"Lease({self.id}, unit={self.unit_id}, tenant={self.tenant_id})"


class Charge(UUIDPrimaryKeyMixin, BaseModel):
    """
    An amount owed by a tenant on a lease.

    Status is managed by django-fsm. PAID is reachable only through
    mark_paid(), which the webhook reconciler calls; the landlord-facing
    service rejects creating charges as paid.
    """

    lease = models.ForeignKey(
        Lease,
        on_delete=models.CASCADE,
        related_name="charges",
    )
    amount = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Amount owed in cents",
    )
    due_date = models.DateField(db_index=True)
    status = FSMField(
        default=ChargeStatus.DUE,
        choices=ChargeStatus.choices,
        db_index=True,
        help_text="Current state of the charge (managed by FSM)",
        protected=True,
    )

    class Meta:
        ordering = ["due_date"]
        indexes = [
            models.Index(fields=["lease", "status"], name="charge_lease_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="charge_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"Charge({self.id}, {self.status}, {self.amount / 100:.2f} USD)"

    @property
    def is_payable(self) -> bool:
        return self.status == ChargeStatus.DUE

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(field=status, source=ChargeStatus.DUE, target=ChargeStatus.PAID)
    def mark_paid(self):
        """
        Settle the charge after the provider confirmed payment.

        Transition: DUE -> PAID
        """

    @transition(field=status, source=ChargeStatus.DUE, target=ChargeStatus.VOID)
    def void(self):
        """
        Cancel the charge so it can no longer be paid.

        Transition: DUE -> VOID
        """
