"""Test configuration for server test suite."""

import os

import pytest

# Keep the process-wide store in memory; no test talks to a real etcd
# This must happen before any imports that read settings
os.environ.setdefault("STORE_BACKEND", "memory")

from nodeinventory.core.namespace import HardwareNamespace  # noqa: E402
from nodeinventory.services import store_service  # noqa: E402
from nodeinventory.services.store_service import InMemoryStore  # noqa: E402


NODES_ROOT = "/test/nodes/discovered"


@pytest.fixture
def namespace():
    return HardwareNamespace(root=NODES_ROOT)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture(autouse=True)
def reset_global_store():
    """Each test starts without a cached process-wide store."""
    store_service.set_store(None)
    yield
    store_service.set_store(None)


@pytest.fixture
def seed_node(store, namespace):
    """Write ``{relative key: value}`` pairs below a node's key."""

    def _seed(node_id, values):
        for relative_key, value in values.items():
            store.set(f"{namespace.node_key(node_id)}/{relative_key}", value)

    return _seed
