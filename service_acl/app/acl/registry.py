"""
Access control lists and the per-type ACL registry.
"""

import threading
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple, Union

from shared.logging import get_logger
from shared.errors import UndefinedAccessControlList
from .models import ALL, BASE_ACTION, normalize_permission

RuleBlock = Callable[["ACL"], Any]
TypeId = Union[type, str]


class Action:
    """Named operation holding rules in declaration order."""

    def __init__(self, name: str, rules: Optional[List[Tuple[Hashable, bool]]] = None):
        self.name = name
        self.permissions: List[Tuple[Hashable, bool]] = list(rules or [])

    def allow(self, *permissions):
        for permission in permissions:
            self.permissions.append((normalize_permission(permission), True))

    def deny(self, *permissions):
        for permission in permissions:
            self.permissions.append((normalize_permission(permission), False))

    def clone(self) -> "Action":
        return Action(self.name, self.permissions)

    def __repr__(self):
        return f"Action({self.name!r}, {self.permissions!r})"


class _ActionScope:
    """Routes ``allow``/``deny`` calls to the named actions while active."""

    def __init__(self, acl: "ACL", names: Tuple[str, ...]):
        self.acl = acl
        self.names = list(names)

    def __enter__(self) -> "ACL":
        self.acl._scopes.append(self.names)
        return self.acl

    def __exit__(self, exc_type, exc, tb):
        self.acl._scopes.pop()
        return False


class ACL:
    """Access control list of one protected type.

    Rules are written through ``allow``/``deny``; outside of an ``on`` scope
    they go to the base action ``_`` which every guard call evaluates first.

        def document_rules(acl):
            acl.deny(ALL)
            acl.allow("admin")
            with acl.on("edit"):
                acl.allow({"owner_of": "doc"})
            acl.on("create", rules=lambda a: a.allow("manager"))
    """

    def __init__(self, suspect: Any = None, rules: Optional[RuleBlock] = None):
        self.suspect = suspect
        self.actions: Dict[str, Action] = {BASE_ACTION: Action(BASE_ACTION)}
        self._scopes: List[List[str]] = []
        if rules is not None:
            self.evaluate(rules)

    def evaluate(self, rules: RuleBlock) -> "ACL":
        """Apply a rule block to this ACL."""
        rules(self)
        return self

    def action(self, name: str) -> Action:
        """Get the named action, creating it when missing."""
        if name not in self.actions:
            self.actions[name] = Action(name)
        return self.actions[name]

    def get_action(self, name: str) -> Action:
        """Get the named action without registering it; unknown names are empty."""
        return self.actions.get(name) or Action(name)

    def _current_actions(self) -> List[Action]:
        names = self._scopes[-1] if self._scopes else [BASE_ACTION]
        return [self.action(name) for name in names]

    def allow(self, *permissions):
        for action in self._current_actions():
            action.allow(*permissions)

    def deny(self, *permissions):
        for action in self._current_actions():
            action.deny(*permissions)

    def on(self, *names: str, rules: Optional[RuleBlock] = None) -> _ActionScope:
        """Scope rule declarations to one or more named actions.

        Use as a context manager, or pass ``rules`` to apply a block at once.
        """
        for name in names:
            self.action(name)
        scope = _ActionScope(self, names)
        if rules is not None:
            with scope:
                rules(self)
        return scope

    @property
    def all(self):
        return ALL

    def clone(self, rules: Optional[RuleBlock] = None) -> "ACL":
        """Copy every action and rule list so the copy evolves on its own."""
        acl = ACL(self.suspect)
        acl.actions = {name: action.clone() for name, action in self.actions.items()}
        if rules is not None:
            acl.evaluate(rules)
        return acl

    def __repr__(self):
        return f"ACL(suspect={self.suspect!r}, actions={list(self.actions)!r})"


def type_name(type_id: TypeId) -> str:
    """Registry key for a protected type."""
    if isinstance(type_id, str):
        return type_id
    return f"{type_id.__module__}.{type_id.__qualname__}"


class ACLRegistry:
    """Registry of ACLs keyed by protected type."""

    def __init__(self):
        self.logger = get_logger("acl.registry")
        self._acls: Dict[str, ACL] = {}
        self._parents: Dict[str, str] = {}
        self._lock = threading.RLock()

    def define(self, type_id: TypeId, suspect: Any = None,
               rules: Optional[RuleBlock] = None,
               parent: Optional[TypeId] = None) -> ACL:
        """Create or extend the ACL of ``type_id``.

        A new ACL starts as a clone of the nearest ancestor ACL if there is
        one. For an existing ACL the suspect is replaced only when given.
        """
        name = type_name(type_id)
        with self._lock:
            if parent is not None:
                self._parents[name] = type_name(parent)

            acl = self._acls.get(name)
            if acl is not None:
                if suspect is not None:
                    acl.suspect = suspect
                if rules is not None:
                    acl.evaluate(rules)
                self.logger.debug("ACL extended", acl=name)
                return acl

            ancestor = self._find_ancestor(type_id)
            if ancestor is not None:
                acl = ancestor.clone()
                if suspect is not None:
                    acl.suspect = suspect
                if rules is not None:
                    acl.evaluate(rules)
                self.logger.debug("ACL inherited", acl=name)
            else:
                acl = ACL(suspect, rules)
                self.logger.debug("ACL created", acl=name)

            self._acls[name] = acl
            return acl

    def clone_for(self, child_type: TypeId, source: TypeId) -> ACL:
        """Register a structurally independent copy of ``source``'s ACL."""
        acl = self.lookup(source).clone()
        with self._lock:
            self._acls[type_name(child_type)] = acl
            self._parents[type_name(child_type)] = type_name(source)
        return acl

    def get(self, type_id: TypeId) -> Optional[ACL]:
        """Own ACL of a type, without inheritance."""
        return self._acls.get(type_name(type_id))

    def lookup(self, type_id: TypeId) -> ACL:
        """ACL of a type or its nearest ancestor."""
        acl = self.get(type_id)
        if acl is None:
            acl = self._find_ancestor(type_id)
        if acl is None:
            name = type_name(type_id)
            raise UndefinedAccessControlList(f"No ACL for {name} class", {"acl": name})
        return acl

    def _find_ancestor(self, type_id: TypeId) -> Optional[ACL]:
        if isinstance(type_id, type):
            for base in type_id.__mro__[1:]:
                acl = self._acls.get(type_name(base))
                if acl is not None:
                    return acl

        parent = self._parents.get(type_name(type_id))
        while parent is not None:
            if parent in self._acls:
                return self._acls[parent]
            parent = self._parents.get(parent)
        return None

    def __contains__(self, type_id: TypeId) -> bool:
        return type_name(type_id) in self._acls

    def clear(self):
        with self._lock:
            self._acls.clear()
            self._parents.clear()


registry = ACLRegistry()


def get_registry() -> ACLRegistry:
    """Process-wide ACL registry."""
    return registry


def suspects(suspect: Any = None, rules: Optional[RuleBlock] = None,
             acl_registry: Optional[ACLRegistry] = None):
    """Class decorator registering an ACL for the decorated class.

        @suspects("user", rules=document_rules)
        class Document(Guarded):
            ...
    """
    def decorator(cls):
        (acl_registry or registry).define(cls, suspect, rules)
        return cls
    return decorator


access_control = suspects
