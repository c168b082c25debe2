"""
Role store package.

Holds the role store contract and its backends:

- base: Packing, fallback lookup and logging shared by all backends.
- redis_store: Redis sets with MULTI/EXEC for compound writes.
- memory: In-process sets, mainly for tests.

``configure`` installs the process-wide store used by suspects and guards;
``build_store`` creates one from service configuration.
"""

import threading
from typing import Optional

from shared.config import BaseConfig
from shared.errors import ValidationError
from .base import RoleStore
from .helpers import ScopeRef, pack, suspect_id, try_pack, unpack
from .memory import MemoryRoleStore
from .redis_store import RedisRoleStore

_store: Optional[RoleStore] = None
_store_lock = threading.Lock()


def build_store(config: BaseConfig) -> RoleStore:
    """Create the role store selected by configuration."""
    backend = config.store_backend.lower()
    if backend == "redis":
        return RedisRoleStore(
            config.redis_url,
            roles_key=config.roles_key,
            suspect_roles_key=config.suspect_roles_key
        )
    if backend == "memory":
        return MemoryRoleStore()
    raise ValidationError(f"Unknown role store backend: {config.store_backend}")


def configure(store: RoleStore) -> RoleStore:
    """Install the process-wide role store."""
    global _store
    with _store_lock:
        _store = store
    return store


def get_store() -> RoleStore:
    """Process-wide role store, built from environment config on first use."""
    global _store
    with _store_lock:
        if _store is None:
            _store = build_store(BaseConfig())
        return _store


__all__ = [
    "RoleStore", "RedisRoleStore", "MemoryRoleStore", "ScopeRef",
    "build_store", "configure", "get_store", "pack", "try_pack", "unpack", "suspect_id",
]
