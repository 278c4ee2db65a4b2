"""Permission checking utilities built on an Rbac store.

Provides a subject-bound checker, a decorator for plain callables, and a
FastAPI dependency for guarding endpoints.
"""

import inspect
from functools import wraps
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Set

from fastapi import HTTPException, Request, status

from ...common.logger import get_logger
from .exceptions import PermissionDeniedError
from .rules import Attributes
from .store import Rbac

logger = get_logger("checker")


class PermissionChecker:
    """Checks permissions for one subject against an Rbac store."""

    def __init__(self, rbac: Rbac, subject: Attributes):
        """
        Initialize with a store and the subject's attributes.

        Args:
            rbac: Store to query
            subject: Subject attributes; ``subject["role"]`` names its role
        """
        self.rbac = rbac
        self.subject = subject

    @property
    def role(self) -> Optional[str]:
        return self.subject.get("role")

    def get_permissions(self) -> Set[str]:
        return self.rbac.get_permissions(self.role)

    def has_permission(self, permission: str) -> bool:
        """Check if the subject's role holds a specific permission."""
        return self.rbac.has_permission(self.role, permission)

    def has_any_permission(self, permissions: Iterable[str]) -> bool:
        """Check if the subject's role holds any of the given permissions."""
        return self.rbac.has_some_permission(self.role, permissions)

    def has_all_permissions(self, permissions: Iterable[str]) -> bool:
        """Check if the subject's role holds all of the given permissions."""
        return self.rbac.has_all_permissions(self.role, permissions)

    def can(
        self,
        permission: str,
        resource: Optional[Attributes] = None,
        context: Optional[Attributes] = None,
    ) -> bool:
        """Run the full role and rule decision for the subject."""
        return self.rbac.can(self.subject, permission, resource, context)


def require_permission(
    rbac: Rbac,
    permission: str,
    *,
    subject_arg: str = "subject",
    resource_arg: Optional[str] = None,
    context_arg: Optional[str] = None,
):
    """
    Decorator factory guarding a function with ``rbac.can()``.

    The subject (and optionally resource and context) are taken from the
    named parameters of each call, whether passed by keyword or by
    position. Works for plain and async functions.

    Args:
        rbac: Store making the decision
        permission: Permission required to call the function
        subject_arg: Parameter holding the subject attributes
        resource_arg: Parameter holding resource attributes
        context_arg: Parameter holding context attributes

    Raises (at call time):
        PermissionDeniedError: If the subject is missing or denied

    Usage:
        @require_permission(rbac, "article:update", resource_arg="article")
        def update_article(subject, article):
            ...
    """
    def check(arguments: Mapping[str, Any]) -> None:
        subject = arguments.get(subject_arg)
        if subject is None:
            raise PermissionDeniedError(permission)

        resource = arguments.get(resource_arg) if resource_arg else None
        context = arguments.get(context_arg) if context_arg else None

        if not rbac.can(subject, permission, resource, context):
            raise PermissionDeniedError(permission, subject.get("role"))

    def decorator(func: Callable):
        signature = inspect.signature(func)

        def call_arguments(args, kwargs) -> Dict[str, Any]:
            # Keyword extras swallowed by **kwargs stay reachable by name
            return {**kwargs, **signature.bind_partial(*args, **kwargs).arguments}

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                check(call_arguments(args, kwargs))
                return await func(*args, **kwargs)

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            check(call_arguments(args, kwargs))
            return func(*args, **kwargs)

        return wrapper
    return decorator


class PermissionDependency:
    """
    FastAPI dependency for permission checking.

    Expects an upstream authentication layer to place the subject's
    attributes on ``request.state.subject``.

    Usage:
        guard = PermissionDependency(rbac, "article:update",
                                     resource_getter=load_article)

        @router.put("/articles/{id}", dependencies=[Depends(guard)])
        async def update_article(id: str):
            ...
    """

    def __init__(
        self,
        rbac: Rbac,
        permission: str,
        *,
        resource_getter: Optional[Callable[[Request], Optional[Attributes]]] = None,
        context_getter: Optional[Callable[[Request], Optional[Attributes]]] = None,
    ):
        self.rbac = rbac
        self.permission = permission
        self.resource_getter = resource_getter
        self.context_getter = context_getter

    async def __call__(self, request: Request) -> bool:
        subject = getattr(request.state, "subject", None)

        if not subject:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required"
            )

        resource = self.resource_getter(request) if self.resource_getter else None
        context = self.context_getter(request) if self.context_getter else None

        if not self.rbac.can(subject, self.permission, resource, context):
            logger.debug(
                f"Rejected {request.method} {request.url.path}: "
                f"requires {self.permission}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {self.permission}"
            )

        return True
