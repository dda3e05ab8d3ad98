"""
Authentication application.

This app provides the custom email-based User model shared by landlords
(admin role) and tenants. Tokens are issued by the identity service and
only verified here through djangorestframework-simplejwt.

Usage:
    from authentication.models import User, UserRole
"""
