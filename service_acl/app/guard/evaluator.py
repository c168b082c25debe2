"""
Decision evaluator for guard calls.
"""

from typing import Any, Callable, Hashable, Iterable, Optional

from shared.logging import get_logger, reset_suspect_context, set_suspect_context
from shared.metrics import MetricsCollector, get_metrics_collector
from shared.errors import AccessDenied, InvalidPermission, InvalidSuspect
from ..acl.merge import OrderedRules, merge_rules
from ..acl.models import (
    ALL, BASE_ACTION, Accessor, Attribute, Literal, ScopedPermission
)
from ..acl.registry import ACL, ACLRegistry, RuleBlock, get_registry, type_name
from ..store.helpers import suspect_id
from .suspect import is_suspect


def resolve_reference(instance: Any, reference: Any) -> Any:
    """Resolve an object reference against the protected instance."""
    if isinstance(reference, Attribute):
        return getattr(instance, reference.name, None)
    if isinstance(reference, Accessor):
        return getattr(instance, reference.name)()
    if isinstance(reference, Literal):
        return reference.value
    return reference


def resolve_suspect(instance: Any, descriptor: Any) -> Any:
    """Find the current actor of a protected instance.

    * ``str`` or ``Attribute``: attribute of the instance
    * ``Accessor``: zero-argument method of the instance
    * plain callable (not a class): ``descriptor(instance)``
    * anything else is the actor itself
    """
    if descriptor is None:
        return None
    if isinstance(descriptor, str):
        descriptor = Attribute(descriptor)
    if isinstance(descriptor, (Attribute, Accessor, Literal)):
        return resolve_reference(instance, descriptor)
    if callable(descriptor) and not isinstance(descriptor, type) and not is_suspect(descriptor):
        return descriptor(instance)
    return descriptor


class GuardEvaluator:
    """Merges the rules of a guard call and walks them to a verdict."""

    def __init__(self, acl_registry: Optional[ACLRegistry] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.registry = acl_registry or get_registry()
        self.metrics = metrics or get_metrics_collector()
        self.logger = get_logger("acl.guard")

    def merged_rules(self, acl: ACL, actions: Iterable[str] = (),
                     rules: Optional[RuleBlock] = None) -> OrderedRules:
        """Rules of ``_``, then each named action, then the inline block."""
        sources = [acl.get_action(BASE_ACTION).permissions]
        sources.extend(acl.get_action(action).permissions for action in actions)
        if rules is not None:
            # Inline rules are per call and never stored on the ACL
            sources.append(ACL(rules=rules).get_action(BASE_ACTION).permissions)
        return merge_rules(*sources)

    def guard(self, instance: Any, *actions: str, rules: Optional[RuleBlock] = None,
              suspect: Any = None) -> bool:
        """Raise ``AccessDenied`` unless the suspect may perform ``actions``."""
        acl_name = type_name(type(instance))
        acl = self.registry.lookup(type(instance))

        if suspect is None:
            suspect = resolve_suspect(instance, acl.suspect)
        if not is_suspect(suspect):
            raise InvalidSuspect(f"Invalid ACL suspect: {suspect!r}", {"acl": acl_name})

        ident = suspect_id(suspect)
        token = set_suspect_context(ident)
        try:
            with self.metrics.time_operation("guard_duration_seconds", acl=acl_name):
                permissions = self.merged_rules(acl, actions, rules)
                authorized = self.evaluate(
                    permissions,
                    lambda permission: self.assert_permission(instance, suspect, permission)
                )

            self.metrics.record_guard_decision(acl_name, "allow" if authorized else "deny")

            if not authorized:
                self.logger.info("Access denied", acl=acl_name, actions=list(actions), suspect_id=ident)
                raise AccessDenied("Access Denied", {"acl": acl_name, "actions": list(actions)})

            self.logger.debug("Access granted", acl=acl_name, actions=list(actions), suspect_id=ident)
            return True
        finally:
            reset_suspect_context(token)

    @staticmethod
    def evaluate(permissions: Iterable, check: Callable[[Hashable], bool]) -> bool:
        """Walk merged rules in order.

        Blanket rules reset the verdict, allow rules can only turn it on and
        a matching deny rule vetoes whatever came before it.
        """
        authorized = False
        for permission, allow in permissions:
            if permission is ALL:
                authorized = allow
                continue
            if allow:
                authorized = authorized or check(permission)
            elif check(permission):
                authorized = False
        return authorized

    def assert_permission(self, instance: Any, suspect: Any, permission: Any) -> bool:
        """Whether the suspect holds the given permission on ``instance``."""
        if isinstance(permission, ScopedPermission):
            obj = resolve_reference(instance, permission.reference)
            return suspect.roles.has(permission.role, obj)
        if isinstance(permission, str):
            return suspect.roles.has(permission)
        raise InvalidPermission(f"Invalid ACL permission: {permission!r}")


_evaluator: Optional[GuardEvaluator] = None


def get_evaluator() -> GuardEvaluator:
    """Process-wide evaluator bound to the default registry."""
    global _evaluator
    if _evaluator is None:
        _evaluator = GuardEvaluator()
    return _evaluator


def guard(instance: Any, *actions: str, rules: Optional[RuleBlock] = None) -> bool:
    """Guard ``instance`` with the default registry and store."""
    return get_evaluator().guard(instance, *actions, rules=rules)


authorize = guard
