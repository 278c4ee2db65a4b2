"""Exceptions raised by the RBAC engine."""

from typing import Optional


class RbacError(Exception):
    """Base class for all RBAC engine errors."""


class GroupNotFoundError(RbacError):
    """Raised when a role references a group that has not been defined."""

    def __init__(self, group_name: str):
        super().__init__(f"Group '{group_name}' does not exist")
        self.group_name = group_name


class RestoreError(RbacError):
    """Raised when a dump cannot be parsed or restored.

    The underlying exception is available as ``__cause__``.
    """

    def __init__(self, reason: str):
        super().__init__(f"Unable to restore dump: {reason}")
        self.reason = reason


class PermissionDeniedError(RbacError):
    """Raised when a subject is denied a guarded action."""

    def __init__(self, permission: str, role: Optional[str] = None):
        super().__init__(f"Permission denied: requires {permission}")
        self.permission = permission
        self.role = role
