"""
Suspect side of the engine: actors whose roles are queried.
"""

from typing import Any, Optional, Set

from ..store import RoleStore, get_store
from ..store.helpers import suspect_id


class SuspectRoles:
    """Role operations bound to one suspect."""

    def __init__(self, suspect: Any, store: Optional[RoleStore] = None):
        self.suspect = suspect
        self._store = store

    @property
    def store(self) -> RoleStore:
        return self._store or get_store()

    def has(self, role: Any, obj: Any = None) -> bool:
        return self.store.check(role, self.suspect, obj)

    def assign(self, role: Any, obj: Any = None):
        self.store.assign(role, self.suspect, obj)

    def delete(self, role: Any, obj: Any = None):
        self.store.revoke(role, self.suspect, obj)

    def all(self) -> Set[str]:
        return self.store.roles(self.suspect)


class Suspect:
    """Mixin for actor classes; instances need an ``id``.

        class User(Suspect):
            def __init__(self, id):
                self.id = id

        user.roles.assign("owner_of", document)
        user.roles.has("owner_of", document)
    """

    acl_suspect = True
    acl_store: Optional[RoleStore] = None

    @property
    def suspect_id(self) -> str:
        return suspect_id(self)

    @property
    def roles(self) -> SuspectRoles:
        return SuspectRoles(self, self.acl_store)


def is_suspect(candidate: Any) -> bool:
    """Whether ``candidate`` can answer role queries."""
    if getattr(candidate, "acl_suspect", False) is not True:
        return False
    roles = getattr(candidate, "roles", None)
    return callable(getattr(roles, "has", None))
