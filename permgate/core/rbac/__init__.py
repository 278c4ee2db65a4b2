"""RBAC (Role-Based Access Control) module for permgate.

This module defines the role and group store, permission resolution,
attribute-based rules, and access control utilities.
"""

from .exceptions import RbacError, GroupNotFoundError, RestoreError, PermissionDeniedError
from .dump import RbacDump, RoleEntry, GroupEntry, parse_dump, load_dump_file
from .rules import RuleFunction, RuleRegistry
from .store import Rbac
from .checker import PermissionChecker, PermissionDependency, require_permission

__all__ = [
    "Rbac",
    "RbacDump",
    "RoleEntry",
    "GroupEntry",
    "parse_dump",
    "load_dump_file",
    "RuleFunction",
    "RuleRegistry",
    "RbacError",
    "GroupNotFoundError",
    "RestoreError",
    "PermissionDeniedError",
    "PermissionChecker",
    "PermissionDependency",
    "require_permission",
]
