"""
Unit tests for role stores.
"""

import threading
from unittest.mock import MagicMock

import pytest

from shared.config import BaseConfig
from shared.errors import ValidationError
from service_acl.app.store import (
    MemoryRoleStore, RedisRoleStore, ScopeRef, build_store, pack, suspect_id, try_pack, unpack
)


class TestHelpers:
    """Test cases for entry packing."""

    def test_pack_global_role(self):
        assert pack("admin") == "admin"

    def test_pack_class_scope(self, models):
        assert pack("manager", models.Project) == "manager/Project"

    def test_pack_instance_scope(self, models):
        assert pack("owner", models.Project(7)) == "owner/Project/7"

    def test_pack_scope_ref(self):
        assert pack("owner", ScopeRef("Project", "7")) == "owner/Project/7"
        assert pack("manager", ScopeRef("Project")) == "manager/Project"

    def test_pack_object_without_id(self):
        with pytest.raises(ValidationError):
            pack("owner", object())

    def test_try_pack_object_without_id(self, models):
        assert try_pack("owner", object()) is None
        assert try_pack("owner", models.Project(7)) == "owner/Project/7"
        assert try_pack("admin") == "admin"

    def test_unpack(self):
        assert unpack("admin") == ("admin",)
        assert unpack(b"manager/Project") == ("manager", "Project")
        assert unpack("owner/Project/a/b") == ("owner", "Project", "a/b")

    def test_suspect_id(self, models):
        assert suspect_id("alice") == "alice"
        assert suspect_id(10) == "10"
        assert suspect_id(models.User("bob")) == "bob"

        with pytest.raises(ValidationError):
            suspect_id(object())


class TestMemoryRoleStore:
    """Test cases for MemoryRoleStore."""

    def test_assign_and_check_global(self, store):
        store.assign("admin", "alice")

        assert store.check("admin", "alice") is True
        assert store.check("admin", "bob") is False

    def test_roles_excludes_scoped_assignments(self, store, models):
        store.assign("admin", "s")
        store.assign("manager", "s", models.Project(1))
        store.assign("auditor", "s", models.Project)

        assert store.roles("s") == {"admin"}

    def test_catalogue_lists_unscoped_roles_of_everyone(self, store, models):
        store.assign("admin", "alice")
        store.assign("guest", "bob")
        store.assign("owner", "bob", models.Project(1))

        assert store.roles() == {"admin", "guest"}

    def test_reassign_is_noop(self, store):
        store.assign("admin", "alice")
        store.assign("admin", "alice")

        assert store.roles("alice") == {"admin"}
        assert store.roles() == {"admin"}

    def test_class_scope_covers_instances(self, store, models):
        store.assign("manager", "s", models.Project)

        assert store.check("manager", "s", models.Project(1)) is True
        assert store.check("manager", "s", models.Project(2)) is True
        assert store.check("manager", "s", models.Project) is True
        assert store.check("manager", "s", models.Page(1)) is False

    def test_instance_scope_does_not_cover_class(self, store, models):
        store.assign("owner", "s", models.Project(1))

        assert store.check("owner", "s", models.Project(1)) is True
        assert store.check("owner", "s", models.Project(2)) is False
        assert store.check("owner", "s", models.Project) is False

    def test_class_scope_covers_instances_without_id(self, store, models):
        class Plain:
            pass

        store.assign("manager", "s", Plain)

        assert store.check("manager", "s", Plain()) is True
        assert store.check("manager", "t", Plain()) is False
        assert store.check("manager", "s", models.Page(1)) is False

    def test_no_fallback_to_global_role(self, store, models):
        store.assign("manager", "s")

        assert store.check("manager", "s", models.Project(1)) is False
        assert store.check("manager", "s", models.Project) is False

    def test_scoped_role_does_not_grant_global(self, store, models):
        store.assign("manager", "s", models.Project)

        assert store.check("manager", "s") is False

    def test_scope_ref_fallback(self, store):
        store.assign("manager", "s", ScopeRef("Project"))

        assert store.check("manager", "s", ScopeRef("Project", "9")) is True
        assert store.check("manager", "s", ScopeRef("Page", "9")) is False

    def test_revoke_exact_scope_only(self, store, models):
        project = models.Project(1)
        store.assign("manager", "s", models.Project)
        store.assign("manager", "s", project)
        store.assign("manager", "s")

        store.revoke("manager", "s", project)

        assert store.check("manager", "s", project) is True
        store.revoke("manager", "s", models.Project)
        assert store.check("manager", "s", project) is False
        assert store.check("manager", "s") is True

    def test_revoke_keeps_catalogue(self, store):
        store.assign("admin", "alice")
        store.revoke("admin", "alice")

        assert store.roles("alice") == set()
        assert store.roles() == {"admin"}

    def test_revoke_unknown_suspect(self, store):
        store.revoke("admin", "nobody")

        assert store.roles("nobody") == set()

    def test_clear(self, store, models):
        store.assign("admin", "alice")
        store.assign("owner", "alice", models.Project(1))

        store.clear()

        assert store.roles() == set()
        assert store.check("owner", "alice", models.Project(1)) is False

    def test_accepts_suspect_objects(self, store, models):
        alice = models.User("alice")
        store.assign("admin", alice)

        assert store.check("admin", "alice") is True
        assert store.roles(alice) == {"admin"}

    def test_concurrent_assign(self, store):
        threads = [threading.Thread(target=store.assign, args=("admin", "s")) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.roles() == {"admin"}
        assert store.roles("s") == {"admin"}

    def test_operations_are_counted(self, store, metrics):
        store.assign("admin", "alice")
        store.check("admin", "alice")

        assert metrics.sample_value(
            "role_store_operations_total", {"operation": "assign"}
        ) == 1.0
        assert metrics.sample_value(
            "role_store_operations_total", {"operation": "check"}
        ) == 1.0


class TestRedisRoleStore:
    """Test cases for RedisRoleStore with a mocked client."""

    @pytest.fixture
    def redis_client(self):
        return MagicMock()

    @pytest.fixture
    def redis_store(self, redis_client, metrics):
        return RedisRoleStore(client=redis_client, metrics=metrics)

    def test_assign_global_uses_transaction(self, redis_store, redis_client):
        pipeline = redis_client.pipeline.return_value.__enter__.return_value

        redis_store.assign("admin", "alice")

        redis_client.pipeline.assert_called_once_with(transaction=True)
        pipeline.sadd.assert_any_call("roles", "admin")
        pipeline.sadd.assert_any_call("suspect.alice.roles", "admin")
        pipeline.execute.assert_called_once()

    def test_assign_scoped_skips_catalogue(self, redis_store, redis_client, models):
        pipeline = redis_client.pipeline.return_value.__enter__.return_value

        redis_store.assign("owner", "alice", models.Project(3))

        pipeline.sadd.assert_called_once_with("suspect.alice.roles", "owner/Project/3")

    def test_roles_for_suspect(self, redis_store, redis_client):
        redis_client.smembers.return_value = {b"admin", b"owner/Project/3", "manager/Project"}

        assert redis_store.roles("alice") == {"admin"}
        redis_client.smembers.assert_called_once_with("suspect.alice.roles")

    def test_catalogue(self, redis_store, redis_client):
        redis_client.smembers.return_value = {"admin", "guest"}

        assert redis_store.roles() == {"admin", "guest"}
        redis_client.smembers.assert_called_once_with("roles")

    def test_check_falls_back_to_class(self, redis_store, redis_client, models):
        redis_client.sismember.side_effect = [False, True]

        assert redis_store.check("manager", "alice", models.Project(3)) is True
        assert [c.args for c in redis_client.sismember.call_args_list] == [
            ("suspect.alice.roles", "manager/Project/3"),
            ("suspect.alice.roles", "manager/Project"),
        ]

    def test_check_instance_without_id_uses_class(self, redis_store, redis_client):
        class Plain:
            pass

        redis_client.sismember.return_value = True

        assert redis_store.check("manager", "alice", Plain()) is True
        redis_client.sismember.assert_called_once_with("suspect.alice.roles", "manager/Plain")

    def test_check_class_has_no_fallback(self, redis_store, redis_client, models):
        redis_client.sismember.return_value = False

        assert redis_store.check("manager", "alice", models.Project) is False
        redis_client.sismember.assert_called_once_with("suspect.alice.roles", "manager/Project")

    def test_check_global(self, redis_store, redis_client):
        redis_client.sismember.return_value = False

        assert redis_store.check("admin", "alice") is False
        redis_client.sismember.assert_called_once_with("suspect.alice.roles", "admin")

    def test_revoke(self, redis_store, redis_client):
        redis_store.revoke("admin", "alice")

        redis_client.srem.assert_called_once_with("suspect.alice.roles", "admin")

    def test_clear(self, redis_store, redis_client):
        redis_store.clear()

        redis_client.flushdb.assert_called_once()

    def test_custom_keys(self, redis_client, metrics):
        store = RedisRoleStore(client=redis_client, roles_key="acl:roles",
                               suspect_roles_key="acl:suspect:%s", metrics=metrics)
        redis_client.sismember.return_value = True

        store.check("admin", "alice")

        redis_client.sismember.assert_called_once_with("acl:suspect:alice", "admin")

    def test_transport_errors_propagate(self, redis_store, redis_client):
        import redis

        redis_client.sismember.side_effect = redis.ConnectionError("down")

        with pytest.raises(redis.ConnectionError):
            redis_store.check("admin", "alice")

    def test_health_check(self, redis_store, redis_client):
        import redis

        redis_client.ping.return_value = True
        assert redis_store.health_check() is True

        redis_client.ping.side_effect = redis.ConnectionError("down")
        assert redis_store.health_check() is False


class TestBuildStore:
    """Test cases for build_store."""

    def test_memory_backend(self):
        assert isinstance(build_store(BaseConfig(store_backend="memory")), MemoryRoleStore)

    def test_redis_backend(self):
        store = build_store(BaseConfig(store_backend="redis", roles_key="r", redis_url="redis://cache:6379/1"))

        assert isinstance(store, RedisRoleStore)
        assert store.roles_key == "r"
        assert store.redis_url == "redis://cache:6379/1"

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            build_store(BaseConfig(store_backend="riak"))
