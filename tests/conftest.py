"""Pytest configuration and shared fixtures."""

import pytest

from permgate.core.config import Settings
from permgate.core.rbac import Rbac


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def rbac(settings):
    """A fresh, empty store."""
    return Rbac(settings=settings)


@pytest.fixture
def blog_rbac(rbac):
    """Store with the admin/editor/user blog setup."""
    return (
        rbac
        .add_group("admins", ["*:*"])
        .add_group("editors", ["article:read", "article:update"])
        .add_role("admin", [], ["admins"])
        .add_role("editor", [], ["editors"])
        .add_role("user", ["article:read"], [])
    )


@pytest.fixture
def sample_dump():
    """Structured dump with partial entries."""
    return {
        "groups": {
            "group1": {"permissions": ["action1", "action2"]},
            "group2": {},
        },
        "roles": {
            "role1": {"permissions": ["action3"], "memberOf": ["group1"]},
            "role2": {"permissions": ["action1", "action4"]},
            "role3": {"memberOf": ["group1"]},
            "role4": {},
        },
    }
