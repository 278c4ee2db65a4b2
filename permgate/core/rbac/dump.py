"""Dump schema and parsing for RBAC store snapshots.

A dump has two top-level mappings:

    {
      "roles":  {"<role>":  {"permissions": [...], "memberOf": [...]}},
      "groups": {"<group>": {"permissions": [...]}}
    }

Every section and field is optional. Rules are never part of a dump.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

DumpInput = Union[str, bytes, bytearray, Mapping[str, Any], "RbacDump"]


class GroupEntry(BaseModel):
    """Dump entry for a single group."""

    model_config = ConfigDict(extra="ignore")

    permissions: Optional[List[str]] = None


class RoleEntry(BaseModel):
    """Dump entry for a single role."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    permissions: Optional[List[str]] = None
    member_of: Optional[List[str]] = Field(default=None, alias="memberOf")


class RbacDump(BaseModel):
    """Structured snapshot of roles and groups."""

    model_config = ConfigDict(extra="ignore")

    roles: Dict[str, RoleEntry] = Field(default_factory=dict)
    groups: Dict[str, GroupEntry] = Field(default_factory=dict)


def parse_dump(dump: DumpInput) -> RbacDump:
    """Parse a textual or structured dump into a validated RbacDump.

    Args:
        dump: JSON text (str or bytes), a mapping, or an RbacDump

    Returns:
        Validated RbacDump

    Raises:
        json.JSONDecodeError: If textual input is not valid JSON
        pydantic.ValidationError: If the structure is invalid
        TypeError: If the input is of an unsupported type
    """
    if isinstance(dump, RbacDump):
        return dump

    if isinstance(dump, (str, bytes, bytearray)):
        data = json.loads(dump)
    elif isinstance(dump, Mapping):
        data = dict(dump)
    else:
        raise TypeError(
            f"Dump must be JSON text or a mapping, got {type(dump).__name__}"
        )

    return RbacDump.model_validate(data)


def load_dump_file(path: Union[str, Path]) -> Any:
    """Load a dump document from a JSON or YAML file.

    Args:
        path: Path to the dump file

    Returns:
        The parsed document (validation happens on restore)

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file is not valid YAML/JSON
    """
    dump_file = Path(path)

    if not dump_file.exists():
        raise FileNotFoundError(f"Dump file not found: {path}")

    # Binary mode lets the YAML reader report undecodable bytes as YAMLError
    with dump_file.open("rb") as f:
        data = yaml.safe_load(f)

    # An empty file is an empty store
    if data is None:
        data = {}

    return data
