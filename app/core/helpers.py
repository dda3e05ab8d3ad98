"""
Helper functions for common infrastructure operations.

These utilities are pure infrastructure - they have no knowledge
of domain concepts like leases, charges or payments.
"""

from __future__ import annotations

import uuid


def validate_uuid(value) -> bool:
    """
    Check if a value is a valid UUID.

    Example:
        is_valid = validate_uuid("550e8400-e29b-41d4-a716-446655440000")  # True
        is_valid = validate_uuid(None)  # False
    """
    if isinstance(value, uuid.UUID):
        return True
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
        return True
    except ValueError:
        return False
