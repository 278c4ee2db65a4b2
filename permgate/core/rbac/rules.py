"""Attribute-based rules attached to permissions.

A rule is a predicate over three attribute bags:

    subject:  who is asking (at least ``role``, plus any attributes)
    resource: what is being accessed, or None
    context:  ambient facts such as time of day, or None

Rules run only after the role-based check has already granted the
permission, so a rule can narrow access but never widen it.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from ...common.logger import get_logger

logger = get_logger("rules")

Attributes = Mapping[str, Any]

RuleFunction = Callable[[Attributes, Optional[Attributes], Optional[Attributes]], bool]


class RuleRegistry:
    """Maps permission strings to rule functions.

    At most one rule exists per permission; registering again replaces it.
    """

    def __init__(self) -> None:
        self._rules: Dict[str, RuleFunction] = {}

    def register(self, permission: str, rule: RuleFunction) -> None:
        """Register a rule for a permission.

        Args:
            permission: Permission string the rule guards
            rule: Predicate called as ``rule(subject, resource, context)``

        Raises:
            TypeError: If rule is not callable
        """
        if not callable(rule):
            raise TypeError(f"Rule for '{permission}' must be callable")
        if permission in self._rules:
            logger.warning(f"Overwriting existing rule for permission: {permission}")
        self._rules[permission] = rule
        logger.debug(f"Registered rule for permission: {permission}")

    def unregister(self, permission: str) -> None:
        """Remove the rule for a permission, if any."""
        if permission in self._rules:
            del self._rules[permission]
            logger.debug(f"Unregistered rule for permission: {permission}")

    def get(self, permission: str) -> Optional[RuleFunction]:
        return self._rules.get(permission)

    def __contains__(self, permission: object) -> bool:
        return permission in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def list_permissions(self) -> List[str]:
        """List permissions that have a rule attached."""
        return list(self._rules.keys())

    def clear(self) -> None:
        self._rules.clear()


def evaluate_rule(
    rule: RuleFunction,
    subject: Attributes,
    resource: Optional[Attributes] = None,
    context: Optional[Attributes] = None,
) -> bool:
    """
    Invoke a rule and return its result unchanged.

    Exceptions raised by the rule propagate to the caller.
    """
    return rule(subject, resource, context)
