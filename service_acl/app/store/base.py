"""
Role store contract.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Set

from shared.logging import get_logger
from shared.metrics import MetricsCollector, get_metrics_collector
from .helpers import class_of, is_class_scope, pack, suspect_id, try_pack, unpack


class RoleStore(ABC):
    """Persists ``suspect has role (scoped to object)`` facts.

    Backends implement the raw set operations; the fallback lookup and the
    packing of entries live here so every backend answers the same way.
    """

    backend_name = "base"

    def __init__(self, metrics: Optional[MetricsCollector] = None):
        self.logger = get_logger(f"acl.store.{self.backend_name}")
        self.metrics = metrics or get_metrics_collector()

    def assign(self, role: Any, suspect: Any, obj: Any = None):
        """Record the fact; unscoped roles are also added to the catalogue atomically."""
        entry = pack(role, obj)
        ident = suspect_id(suspect)
        self._assign(str(role), ident, entry, global_role=obj is None)
        self.metrics.record_store_operation("assign")
        self.logger.info("Role assigned", role=str(role), suspect_id=ident, entry=entry)

    def roles(self, suspect: Any = None) -> Set[str]:
        """Unscoped roles of a suspect, or the global catalogue without one."""
        self.metrics.record_store_operation("roles")
        if suspect is None:
            return set(self._catalogue())

        roles = set()
        for entry in self._members(suspect_id(suspect)):
            parts = unpack(entry)
            if len(parts) == 1:
                roles.add(parts[0])
        return roles

    def check(self, role: Any, suspect: Any, obj: Any = None) -> bool:
        """Membership test falling back from an instance to its class, once."""
        self.metrics.record_store_operation("check")
        ident = suspect_id(suspect)
        entry = try_pack(role, obj)
        if entry is not None and self._is_member(ident, entry):
            return True
        if obj is not None and not is_class_scope(obj):
            return self._is_member(ident, pack(role, class_of(obj)))
        return False

    def revoke(self, role: Any, suspect: Any, obj: Any = None):
        """Remove exactly the given fact."""
        entry = pack(role, obj)
        ident = suspect_id(suspect)
        self._revoke(ident, entry)
        self.metrics.record_store_operation("revoke")
        self.logger.info("Role revoked", role=str(role), suspect_id=ident, entry=entry)

    delete = revoke

    def clear(self):
        """Wipe every assignment and the catalogue."""
        self._clear()
        self.metrics.record_store_operation("clear")
        self.logger.info("Role store cleared")

    def health_check(self) -> bool:
        return True

    @abstractmethod
    def _assign(self, role: str, ident: str, entry: str, global_role: bool):
        """Atomically add ``role`` to the catalogue (when global) and ``entry`` to the suspect."""

    @abstractmethod
    def _catalogue(self) -> Set[str]:
        ...

    @abstractmethod
    def _members(self, ident: str) -> Set[str]:
        ...

    @abstractmethod
    def _is_member(self, ident: str, entry: str) -> bool:
        ...

    @abstractmethod
    def _revoke(self, ident: str, entry: str):
        ...

    @abstractmethod
    def _clear(self):
        ...
