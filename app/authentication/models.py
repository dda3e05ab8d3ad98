"""
Authentication models.

This module defines the User model shared by landlords and tenants.
Credentials are issued by the identity service; this app only stores
the identity and the role that drives authorization.

Related files:
    - managers.py: Custom user manager for email-based creation
    - rentals/permissions.py: Role-based DRF permissions
"""

import uuid

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class UserRole(models.TextChoices):
    """
    Role of a user in the rental system.

    ADMIN: Landlord managing properties, leases and charges
    TENANT: Occupant paying charges on their lease
    """

    ADMIN = "admin", "Admin"
    TENANT = "tenant", "Tenant"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        name: Display name
        role: admin (landlord) or tenant
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        landlord = User.objects.create_user(
            email="owner@example.com",
            password="securepassword",
            role=UserRole.ADMIN,
        )
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this user",
    )
    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Display name",
    )
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.TENANT,
        db_index=True,
        help_text="Landlord (admin) or tenant",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name or self.email.split("@")[0]

    @property
    def is_admin_role(self) -> bool:
        """Whether this user manages properties (landlord)."""
        return self.role == UserRole.ADMIN

    @property
    def is_tenant_role(self) -> bool:
        """Whether this user pays charges on a lease."""
        return self.role == UserRole.TENANT
