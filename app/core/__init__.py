"""
Core infrastructure shared by all apps.

Services (import from core.services):
    - BaseService: transaction and logging helpers
    - ServiceResult: success/failure wrapper

Exceptions (import from core.exceptions):
    - BaseApplicationError and its NotFound/PermissionDenied/Conflict/
      Validation/ExternalService subclasses

Views (import from core.views):
    - health_check
    - error_response: render an application error with its HTTP status

Note:
    Django models and model mixins are NOT imported here to avoid
    AppRegistryNotReady errors. Import them directly from their modules:
        from core.models import BaseModel
        from core.model_mixins import UUIDPrimaryKeyMixin
"""

from .services import BaseService, ServiceResult

from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ConflictError",
    "ExternalServiceError",
]
