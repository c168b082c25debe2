"""
Redis-backed role store.

The global catalogue of role names lives in one set (``roles``); each
suspect has its own set of packed entries (``suspect.{id}.roles``).
"""

from typing import Any, Optional, Set

import redis

from shared.metrics import MetricsCollector
from .base import RoleStore


class RedisRoleStore(RoleStore):
    """Role store keeping assignments in Redis sets."""

    backend_name = "redis"

    ROLES_KEY = "roles"
    SUSPECT_ROLES_KEY = "suspect.%s.roles"

    def __init__(self, redis_url: Optional[str] = None, client: Any = None,
                 roles_key: Optional[str] = None, suspect_roles_key: Optional[str] = None,
                 metrics: Optional[MetricsCollector] = None):
        super().__init__(metrics)
        self.redis_url = redis_url or "redis://localhost:6379/0"
        self._redis: Optional[redis.Redis] = client
        self.roles_key = roles_key or self.ROLES_KEY
        self.suspect_roles_key = suspect_roles_key or self.SUSPECT_ROLES_KEY

    def _get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self._redis is None:
            self._redis = redis.Redis.from_url(self.redis_url, decode_responses=True)
        return self._redis

    def _suspect_key(self, ident: str) -> str:
        return self.suspect_roles_key % ident

    def _assign(self, role: str, ident: str, entry: str, global_role: bool):
        # MULTI/EXEC so readers never see the catalogue and suspect set disagree
        with self._get_redis().pipeline(transaction=True) as pipeline:
            if global_role:
                pipeline.sadd(self.roles_key, role)
            pipeline.sadd(self._suspect_key(ident), entry)
            pipeline.execute()

    def _catalogue(self) -> Set[str]:
        return {self._decode(role) for role in self._get_redis().smembers(self.roles_key)}

    def _members(self, ident: str) -> Set[str]:
        return {self._decode(entry) for entry in self._get_redis().smembers(self._suspect_key(ident))}

    def _is_member(self, ident: str, entry: str) -> bool:
        return bool(self._get_redis().sismember(self._suspect_key(ident), entry))

    def _revoke(self, ident: str, entry: str):
        self._get_redis().srem(self._suspect_key(ident), entry)

    def _clear(self):
        self._get_redis().flushdb()

    def health_check(self) -> bool:
        """Check Redis health."""
        try:
            return bool(self._get_redis().ping())
        except redis.RedisError as e:
            self.logger.error("Redis health check failed", error=str(e))
            return False

    def close(self):
        if self._redis is not None:
            self._redis.close()
            self._redis = None

    @staticmethod
    def _decode(value: Any) -> str:
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value
