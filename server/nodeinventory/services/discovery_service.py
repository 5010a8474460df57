"""Hardware discovery for a node."""

import logging
from typing import Optional

from ..core.config import settings
from ..core.models import DiscoveryResult
from ..core.namespace import HardwareNamespace
from .disk_probe_service import discover_disks
from .executor_service import CommandExecutor, local_executor
from .store_service import KeyValueStore, get_store

logger = logging.getLogger(__name__)


class DiscoveryService:
    """Probes this machine's hardware and stores it under a node id.

    Only disks are discovered so far; processors, memory and network
    adapters are not probed yet.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        namespace: Optional[HardwareNamespace] = None,
        executor: Optional[CommandExecutor] = None,
    ):
        self._store = store
        self._namespace = namespace
        self._executor = executor

    @property
    def store(self) -> KeyValueStore:
        return self._store if self._store is not None else get_store()

    @property
    def namespace(self) -> HardwareNamespace:
        return self._namespace if self._namespace is not None else settings.get_namespace()

    @property
    def executor(self) -> CommandExecutor:
        return self._executor if self._executor is not None else local_executor

    def discover(self, node_id: str) -> DiscoveryResult:
        """Discover hardware for ``node_id``; probe and store errors propagate."""
        logger.info(
            "Discovering hardware for node %s under %s",
            node_id,
            self.namespace.node_key(node_id),
        )
        disks = discover_disks(
            node_id,
            self.store,
            self.namespace,
            self.executor,
            lsblk_path=settings.lsblk_path,
        )
        return DiscoveryResult(node_id=node_id, disks=disks)


discovery_service = DiscoveryService()
