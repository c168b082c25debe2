"""
In-process role store, for tests and single-process deployments.
"""

import threading
from collections import defaultdict
from typing import Dict, Optional, Set

from shared.metrics import MetricsCollector
from .base import RoleStore


class MemoryRoleStore(RoleStore):
    """Role store keeping assignments in Python sets behind a lock."""

    backend_name = "memory"

    def __init__(self, metrics: Optional[MetricsCollector] = None):
        super().__init__(metrics)
        self._lock = threading.RLock()
        self._roles: Set[str] = set()
        self._suspects: Dict[str, Set[str]] = defaultdict(set)

    def _assign(self, role: str, ident: str, entry: str, global_role: bool):
        with self._lock:
            if global_role:
                self._roles.add(role)
            self._suspects[ident].add(entry)

    def _catalogue(self) -> Set[str]:
        with self._lock:
            return set(self._roles)

    def _members(self, ident: str) -> Set[str]:
        with self._lock:
            return set(self._suspects.get(ident, ()))

    def _is_member(self, ident: str, entry: str) -> bool:
        with self._lock:
            return entry in self._suspects.get(ident, ())

    def _revoke(self, ident: str, entry: str):
        with self._lock:
            self._suspects.get(ident, set()).discard(entry)

    def _clear(self):
        with self._lock:
            self._roles.clear()
            self._suspects.clear()
