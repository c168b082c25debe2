"""
Access control list package.

Defines how rules are declared per protected type and merged for a guard
call:

- models: Rule keys (role names, scoped permissions, the ALL sentinel).
- registry: Actions, ACLs, and the per-type registry with inheritance.
- merge: Ordered, key-unique rule sequences with last-write-wins upserts.
"""

from .models import ALL, BASE_ACTION, Accessor, Attribute, Literal, ScopedPermission
from .merge import OrderedRules, merge_rules
from .registry import ACL, ACLRegistry, Action, access_control, get_registry, suspects

__all__ = [
    "ALL", "BASE_ACTION", "Accessor", "Attribute", "Literal", "ScopedPermission",
    "OrderedRules", "merge_rules",
    "ACL", "ACLRegistry", "Action", "access_control", "get_registry", "suspects",
]
