"""Entity records held by the RBAC store.

Permissions are opaque strings compared by exact equality. Roles reference
groups by name only; the lookup happens at resolution time.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set


@dataclass
class Group:
    """A named, reusable bundle of permissions."""

    permissions: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, List[str]]:
        """Convert group to its dump entry."""
        return {"permissions": sorted(self.permissions)}


@dataclass
class Role:
    """Direct permissions plus memberships in named groups."""

    permissions: Set[str] = field(default_factory=set)
    member_of: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        """Convert role to its dump entry."""
        return {
            "permissions": sorted(self.permissions),
            "memberOf": sorted(self.member_of),
        }
