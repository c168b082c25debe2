"""
Shared fixtures for ACL service tests.
"""

from types import SimpleNamespace

import pytest
from prometheus_client import CollectorRegistry

from shared.metrics import MetricsCollector
from service_acl.app.acl.registry import ACLRegistry
from service_acl.app.guard.evaluator import GuardEvaluator
from service_acl.app.guard.suspect import Suspect
from service_acl.app.store import MemoryRoleStore, configure


class User(Suspect):
    """Test suspect."""

    def __init__(self, id):
        self.id = id

    def __repr__(self):
        return f"User({self.id!r})"


class Project:
    """Test scope object."""

    def __init__(self, id):
        self.id = id


class Page:
    """Unrelated scope object."""

    def __init__(self, id):
        self.id = id


@pytest.fixture
def metrics():
    """Metrics collector with its own registry."""
    return MetricsCollector("acl", CollectorRegistry())


@pytest.fixture
def store(metrics):
    """Fresh in-memory role store installed as the process-wide store."""
    role_store = MemoryRoleStore(metrics=metrics)
    configure(role_store)
    yield role_store
    role_store.clear()


@pytest.fixture
def acl_registry():
    """Empty ACL registry."""
    return ACLRegistry()


@pytest.fixture
def evaluator(acl_registry, metrics):
    """Guard evaluator bound to the test registry."""
    return GuardEvaluator(acl_registry=acl_registry, metrics=metrics)


@pytest.fixture
def models():
    """Test model classes."""
    return SimpleNamespace(User=User, Project=Project, Page=Page)
