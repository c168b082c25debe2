"""
ACL service package.

Decides whether a suspect may perform a named action on a protected
object. It provides:

- app.acl: Per-type access control lists and rule merging.
- app.guard: Decision evaluator, Suspect and Guarded mixins.
- app.store: Role store contract with Redis and in-memory backends.
- app.main: HTTP surface for role administration and health.

Guidelines:
- ACLs are declared at import time and only read afterwards.
- The role store is the only shared mutable state; compound writes are atomic.
- Engine errors derive from shared.errors.AccessLayerException.
"""

from shared.errors import AccessDenied, InvalidPermission, InvalidSuspect, UndefinedAccessControlList
from .acl import ALL, ACL, Accessor, Attribute, Literal, access_control, suspects
from .guard import Guarded, Suspect, authorize, guard
from .store import MemoryRoleStore, RedisRoleStore, RoleStore, ScopeRef, configure, get_store

__all__ = [
    "AccessDenied", "InvalidPermission", "InvalidSuspect", "UndefinedAccessControlList",
    "ALL", "ACL", "Accessor", "Attribute", "Literal", "access_control", "suspects",
    "Guarded", "Suspect", "authorize", "guard",
    "MemoryRoleStore", "RedisRoleStore", "RoleStore", "ScopeRef", "configure", "get_store",
]
