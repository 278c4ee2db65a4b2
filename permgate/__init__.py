"""permgate: in-memory role-based access control with an attribute-based overlay."""

from .core.rbac import (
    Rbac,
    RbacError,
    GroupNotFoundError,
    RestoreError,
    PermissionDeniedError,
    PermissionChecker,
    require_permission,
)

__version__ = "0.1.0"

__all__ = [
    "Rbac",
    "RbacError",
    "GroupNotFoundError",
    "RestoreError",
    "PermissionDeniedError",
    "PermissionChecker",
    "require_permission",
]
