"""Read and write the IP address key of a node."""

import logging
from typing import Optional

from ..core.config import settings
from ..core.namespace import HardwareNamespace
from .store_service import KeyValueStore, StoreError, get_store

logger = logging.getLogger(__name__)


class IPAddressService:
    """Accessor for ``<root>/<node>/ipaddress``.

    Store errors, key-not-found included, are passed through to the caller.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        namespace: Optional[HardwareNamespace] = None,
    ):
        self._store = store
        self._namespace = namespace

    @property
    def store(self) -> KeyValueStore:
        return self._store if self._store is not None else get_store()

    @property
    def namespace(self) -> HardwareNamespace:
        return self._namespace if self._namespace is not None else settings.get_namespace()

    def get(self, node_id: str) -> str:
        key = self.namespace.ip_address_key(node_id)
        try:
            return self.store.get(key)
        except StoreError as exc:
            logger.warning("Failed to get IP address for node %s: %s", node_id, exc)
            raise

    def set(self, node_id: str, ip_address: str) -> None:
        """Overwrite the node's IP address; the last writer wins."""
        key = self.namespace.ip_address_key(node_id)
        self.store.set(key, ip_address)
        logger.info("Set IP address of node %s to %s", node_id, ip_address)


ip_address_service = IPAddressService()
