"""In-memory RBAC store with an ABAC overlay.

Holds roles, groups and rules, resolves effective permissions for a role,
and answers access decisions.

Resolution is recomputed from current state on every query:

    effective(role) = union(group.permissions for group in role.member_of
                            if the group still exists)
                      | role.permissions

Decisions run in two phases. The role must hold the permission; only then
is a rule registered for that permission consulted.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Union

import yaml
from pydantic import ValidationError

from ...common.logger import get_logger
from ..config import Settings, get_settings
from .dump import DumpInput, load_dump_file, parse_dump
from .exceptions import GroupNotFoundError, RestoreError
from .models import Group, Role
from .rules import Attributes, RuleFunction, RuleRegistry, evaluate_rule

logger = get_logger("rbac")


def _as_names(values: Iterable[str], what: str) -> List[str]:
    """Materialize a collection of names, rejecting a bare string."""
    if isinstance(values, (str, bytes)):
        raise TypeError(
            f"{what} must be a collection of strings, not a single "
            f"{type(values).__name__}: {values!r}"
        )
    return list(values)


class Rbac:
    """
    Role-based access control store.

    Example:
        rbac = (
            Rbac()
            .add_group("admins", ["*:*"])
            .add_group("editors", ["article:read", "article:update"])
            .add_role("admin", [], ["admins"])
            .add_role("editor", [], ["editors"])
            .add_role("user", ["article:read"])
        )

        rbac.has_permission("editor", "article:update")   # True
        rbac.has_permission("editor", "article:*")        # False, no wildcards

        rbac2 = Rbac.restore(rbac.dump())

    Each instance is independent. The store is not thread-safe; callers
    sharing an instance across threads must serialize access themselves.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize an empty store.

        Args:
            settings: Runtime settings; defaults to ``get_settings()``
        """
        self.settings = settings or get_settings()
        self._roles: Dict[str, Role] = {}
        self._groups: Dict[str, Group] = {}
        self._rules = RuleRegistry()

    def __repr__(self) -> str:
        return (
            f"<Rbac roles={len(self._roles)} groups={len(self._groups)} "
            f"rules={len(self._rules)}>"
        )

    def _init_role(self, name: str) -> Role:
        """Return the role, creating an empty one if absent."""
        role = self._roles.get(name)
        if role is None:
            role = self._roles[name] = Role()
            logger.debug(f"Created role: {name}")
        return role

    def _init_group(self, name: str) -> Group:
        """Return the group, creating an empty one if absent."""
        group = self._groups.get(name)
        if group is None:
            group = self._groups[name] = Group()
            logger.debug(f"Created group: {name}")
        return group

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def add_role(
        self,
        name: str,
        permissions: Iterable[str] = (),
        group_names: Iterable[str] = (),
    ) -> "Rbac":
        """
        Create a role if needed, add permissions and group memberships.

        Can be called repeatedly to extend an existing role. All group names
        are validated before anything is changed, so a failing call leaves
        the store untouched.

        Args:
            name: Role name
            permissions: Permissions granted directly to the role
            group_names: Groups the role becomes a member of

        Returns:
            The store, for chaining

        Raises:
            GroupNotFoundError: If any named group does not exist
            TypeError: If permissions or group_names is a single string
        """
        permissions = _as_names(permissions, "permissions")
        group_names = _as_names(group_names, "group_names")

        for group_name in group_names:
            if group_name not in self._groups:
                raise GroupNotFoundError(group_name)

        role = self._init_role(name)
        role.permissions.update(permissions)
        role.member_of.update(group_names)

        if permissions or group_names:
            logger.debug(
                f"Updated role {name}: +{len(permissions)} permissions, "
                f"groups={group_names}"
            )
        return self

    def remove_role_permissions(self, name: str, permissions: Iterable[str] = ()) -> "Rbac":
        """Remove direct permissions from a role. No-op for unknown roles."""
        permissions = _as_names(permissions, "permissions")
        role = self._roles.get(name)
        if role is not None:
            role.permissions.difference_update(permissions)
            logger.debug(f"Removed permissions from role: {name}")
        return self

    def remove_role(self, name: str) -> "Rbac":
        """Delete a role. Groups are not affected."""
        if self._roles.pop(name, None) is not None:
            logger.debug(f"Removed role: {name}")
        return self

    def has_role(self, name: str) -> bool:
        return name in self._roles

    def get_roles(self) -> List[str]:
        """List role names in insertion order."""
        return list(self._roles.keys())

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def add_group(self, name: str, permissions: Iterable[str] = ()) -> "Rbac":
        """
        Create a group if needed and add permissions to it.

        Args:
            name: Group name
            permissions: Permissions to add

        Returns:
            The store, for chaining

        Raises:
            TypeError: If permissions is a single string
        """
        permissions = _as_names(permissions, "permissions")
        group = self._init_group(name)
        group.permissions.update(permissions)
        return self

    def remove_group_permissions(self, name: str, permissions: Iterable[str] = ()) -> "Rbac":
        """Remove permissions from a group. No-op for unknown groups."""
        permissions = _as_names(permissions, "permissions")
        group = self._groups.get(name)
        if group is not None:
            group.permissions.difference_update(permissions)
            logger.debug(f"Removed permissions from group: {name}")
        return self

    def remove_group(self, name: str) -> "Rbac":
        """
        Delete a group and drop it from every role's memberships.

        Roles themselves are kept.
        """
        if self._groups.pop(name, None) is None:
            return self

        for role in self._roles.values():
            role.member_of.discard(name)

        logger.debug(f"Removed group: {name}")
        return self

    def has_group(self, name: str) -> bool:
        return name in self._groups

    def get_groups(self) -> List[str]:
        """List group names in insertion order."""
        return list(self._groups.keys())

    # ------------------------------------------------------------------
    # Memberships
    # ------------------------------------------------------------------

    def add_role_to_group(self, role_name: str, group_name: str) -> "Rbac":
        """
        Make a role a member of a group, creating the role if needed.

        Raises:
            GroupNotFoundError: If the group does not exist
        """
        if group_name not in self._groups:
            raise GroupNotFoundError(group_name)

        self._init_role(role_name).member_of.add(group_name)
        logger.debug(f"Added role {role_name} to group {group_name}")
        return self

    def remove_role_from_group(self, role_name: str, group_name: str) -> "Rbac":
        role = self._roles.get(role_name)
        if role is not None:
            role.member_of.discard(group_name)
        return self

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get_permissions(self, role_name: str) -> Set[str]:
        """
        Resolve the effective permissions of a role.

        Args:
            role_name: Role name

        Returns:
            A new set of direct and group-inherited permissions; empty for
            unknown roles. Changing it does not affect the store.
        """
        out: Set[str] = set()

        role = self._roles.get(role_name)
        if role is None:
            return out

        for group_name in role.member_of:
            group = self._groups.get(group_name)
            if group is not None:
                out |= group.permissions

        out |= role.permissions
        return out

    def has_permission(self, role_name: str, permission: str) -> bool:
        """Check if a role holds a permission, directly or via a group."""
        return permission in self.get_permissions(role_name)

    def has_some_permission(self, role_name: str, permissions: Iterable[str]) -> bool:
        """Check if a role holds at least one of the given permissions."""
        permissions = _as_names(permissions, "permissions")
        resolved = self.get_permissions(role_name)
        return any(p in resolved for p in permissions)

    def has_all_permissions(self, role_name: str, permissions: Iterable[str]) -> bool:
        """Check if a role holds every one of the given permissions."""
        permissions = _as_names(permissions, "permissions")
        resolved = self.get_permissions(role_name)
        return all(p in resolved for p in permissions)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def add_rule(self, permission: str, rule: RuleFunction) -> "Rbac":
        """
        Attach a rule to a permission, replacing any existing one.

        Example:
            # Authors may only update their own articles
            rbac.add_rule(
                "article:update",
                lambda subject, resource, context: (
                    resource is not None
                    and resource.get("authorId") == subject.get("id")
                ),
            )
        """
        self._rules.register(permission, rule)
        return self

    def remove_rule(self, permission: str) -> "Rbac":
        self._rules.unregister(permission)
        return self

    def has_rule(self, permission: str) -> bool:
        return permission in self._rules

    def get_rules(self) -> List[str]:
        """List permissions that have a rule attached."""
        return self._rules.list_permissions()

    def clear_rules(self) -> "Rbac":
        """Remove every rule. Roles and groups are kept."""
        self._rules.clear()
        return self

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def can(
        self,
        subject: Attributes,
        permission: str,
        resource: Optional[Attributes] = None,
        context: Optional[Attributes] = None,
    ) -> bool:
        """
        Decide whether a subject may use a permission.

        Args:
            subject: Attributes of the caller; ``subject["role"]`` names its role
            permission: Permission being exercised
            resource: Attributes of the target resource, if any
            context: Ambient attributes (time, address, ...), if any

        Returns:
            False when the role lacks the permission. Otherwise the result of
            the permission's rule, or True when no rule is registered.
        """
        role_name = subject.get("role")

        if not self.has_permission(role_name, permission):
            self._log_decision(role_name, permission, False, "role lacks permission")
            return False

        rule = self._rules.get(permission)
        if rule is None:
            self._log_decision(role_name, permission, True, "no rule")
            return True

        result = evaluate_rule(rule, subject, resource, context)
        self._log_decision(role_name, permission, result, "rule")
        return result

    def _log_decision(self, role_name: Any, permission: str, allowed: Any, reason: str) -> None:
        if self.settings.log_decisions:
            logger.info(
                f"Decision for role={role_name} permission={permission}: "
                f"{'allow' if allowed else 'deny'} ({reason})"
            )
        elif not allowed:
            logger.debug(f"Denied role={role_name} permission={permission} ({reason})")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, List[str]]]]:
        """Return roles and groups as a plain structured dump."""
        return {
            "roles": {name: role.to_dict() for name, role in self._roles.items()},
            "groups": {name: group.to_dict() for name, group in self._groups.items()},
        }

    def dump(self) -> str:
        """
        Serialize roles and groups to JSON.

        Rules are not included; re-register them after ``restore``.
        """
        return json.dumps(self.to_dict(), indent=self.settings.dump_indent)

    @classmethod
    def restore(cls, dump: DumpInput, settings: Optional[Settings] = None) -> "Rbac":
        """
        Build a new store from a dump.

        Groups are restored before roles regardless of key order in the
        input. The dump is applied to a fresh instance that is only
        returned once every entry succeeded.

        Args:
            dump: JSON text, a mapping, or an RbacDump
            settings: Settings for the new store

        Returns:
            New Rbac instance

        Raises:
            RestoreError: If the dump cannot be parsed or a role references
                a group missing from the dump
        """
        rbac = cls(settings=settings)
        try:
            data = parse_dump(dump)

            for name, group in data.groups.items():
                rbac.add_group(name, group.permissions or ())

            for name, role in data.roles.items():
                rbac.add_role(name, role.permissions or (), role.member_of or ())
        except (ValueError, TypeError, ValidationError, GroupNotFoundError) as e:
            raise RestoreError(str(e)) from e

        logger.info(
            f"Restored {len(rbac._roles)} roles and {len(rbac._groups)} groups"
        )
        return rbac

    @classmethod
    def from_file(
        cls, path: Union[str, Path], settings: Optional[Settings] = None
    ) -> "Rbac":
        """
        Restore a store from a JSON or YAML dump file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            RestoreError: If the file content is not a valid dump
        """
        try:
            data = load_dump_file(path)
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise RestoreError(str(e)) from e

        return cls.restore(data, settings=settings)
