"""Hierarchical key-value store clients.

Two backends share one contract: an etcd v2 keys API client used in
deployments and an in-memory store used for development and tests. Both
return children in lexical key order.
"""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote

import httpx
import yaml

from ..core.config import STORE_BACKEND_ETCD, STORE_BACKEND_MEMORY, STORE_BACKENDS, Settings, settings
from ..core.converters import format_bool
from ..core.keypath import KEY_SEPARATOR, compose_key
from ..core.tree import StoreNode

logger = logging.getLogger(__name__)


ETCD_KEY_NOT_FOUND = 100


class StoreError(RuntimeError):
    """Base exception for store failures."""


class KeyNotFoundError(StoreError):
    """Raised when a key does not exist in the store."""

    def __init__(self, key: str, message: Optional[str] = None):
        super().__init__(message or f"key not found: {key}")
        self.key = key


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached."""


class KeyValueStore(Protocol):
    """Hierarchical store addressed by '/'-separated keys."""

    def get(self, key: str) -> str:
        """Return the value of a leaf key."""

    def get_tree(self, key: str) -> StoreNode:
        """Return a key and all of its descendants."""

    def set(self, key: str, value: str) -> None:
        """Create or overwrite a leaf key."""

    def list_children(self, key: str) -> List[str]:
        """Return the final segments of the immediate children of a directory."""


class EtcdStore:
    """Client for the etcd v2 keys API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        sorted_listing: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._sorted = sorted_listing
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def _keys_path(key: str) -> str:
        return "/v2/keys" + quote(compose_key(KEY_SEPARATOR, key), safe="/")

    def _request(
        self,
        method: str,
        key: str,
        params: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        try:
            response = self._client.request(
                method, self._keys_path(key), params=params, data=data
            )
        except httpx.RequestError as exc:
            raise StoreUnavailableError(
                f"etcd request {method} {key} to {self.base_url} failed: {exc}"
            ) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.is_success:
            return payload

        error_code = payload.get("errorCode")
        message = payload.get("message") or response.reason_phrase
        if error_code == ETCD_KEY_NOT_FOUND:
            raise KeyNotFoundError(key, f"key not found: {key}")
        if error_code is None and response.status_code >= 500:
            raise StoreUnavailableError(
                f"etcd returned HTTP {response.status_code} for {method} {key}"
            )
        raise StoreError(
            f"etcd {method} {key} failed: {message} "
            f"(errorCode={error_code}, status={response.status_code})"
        )

    def _listing_params(self, recursive: bool = False) -> Dict[str, str]:
        params = {}
        if recursive:
            params["recursive"] = "true"
        if self._sorted:
            params["sorted"] = "true"
        return params

    def get(self, key: str) -> str:
        node = self._request("GET", key).get("node", {})
        if node.get("dir"):
            raise StoreError(f"'{key}' is a directory, not a value")
        return node.get("value", "")

    def get_tree(self, key: str) -> StoreNode:
        payload = self._request("GET", key, params=self._listing_params(recursive=True))
        return StoreNode.from_etcd(payload.get("node", {}))

    def set(self, key: str, value: str) -> None:
        logger.debug("Setting etcd key %s", key)
        self._request("PUT", key, data={"value": value})

    def list_children(self, key: str) -> List[str]:
        payload = self._request("GET", key, params=self._listing_params())
        node = StoreNode.from_etcd(payload.get("node", {}))
        return [child.name for child in node.children]


class InMemoryStore:
    """Store keeping leaf values in a dictionary.

    Directories exist implicitly while at least one leaf lives below them,
    matching how the services use etcd.
    """

    def __init__(self, values: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = {}
        self._lock = threading.Lock()
        for key, value in (values or {}).items():
            self.set(key, value)

    @staticmethod
    def _normalize(key: str) -> str:
        return compose_key(KEY_SEPARATOR, key)

    @staticmethod
    def _prefix(key: str) -> str:
        return key if key.endswith(KEY_SEPARATOR) else key + KEY_SEPARATOR

    def _is_dir(self, key: str) -> bool:
        prefix = self._prefix(key)
        return any(existing.startswith(prefix) for existing in self._values)

    def _child_names(self, key: str) -> List[str]:
        prefix = self._prefix(key)
        names = {
            existing[len(prefix):].split(KEY_SEPARATOR, 1)[0]
            for existing in self._values
            if existing.startswith(prefix)
        }
        return sorted(names)

    def _build(self, key: str) -> StoreNode:
        if key in self._values:
            return StoreNode(key=key, value=self._values[key])
        children = [self._build(compose_key(key, name)) for name in self._child_names(key)]
        return StoreNode(key=key, dir=True, children=children)

    def get(self, key: str) -> str:
        key = self._normalize(key)
        with self._lock:
            if key in self._values:
                return self._values[key]
            if self._is_dir(key):
                raise StoreError(f"'{key}' is a directory, not a value")
        raise KeyNotFoundError(key)

    def get_tree(self, key: str) -> StoreNode:
        key = self._normalize(key)
        with self._lock:
            if key not in self._values and not self._is_dir(key):
                raise KeyNotFoundError(key)
            return self._build(key)

    def set(self, key: str, value: str) -> None:
        key = self._normalize(key)
        with self._lock:
            if self._is_dir(key):
                raise StoreError(f"'{key}' is a directory, not a value")
            parent = key
            while parent.count(KEY_SEPARATOR) > 1:
                parent = parent.rsplit(KEY_SEPARATOR, 1)[0]
                if parent in self._values:
                    raise StoreError(f"'{parent}' is a value, not a directory")
            self._values[key] = value

    def list_children(self, key: str) -> List[str]:
        key = self._normalize(key)
        with self._lock:
            if key in self._values:
                return []
            if not self._is_dir(key):
                raise KeyNotFoundError(key)
            return self._child_names(key)

    def load_mapping(self, mapping: Dict[str, Any], root: str = KEY_SEPARATOR) -> None:
        """Write a nested mapping as leaf keys below ``root``."""
        for name, value in mapping.items():
            key = compose_key(root, str(name))
            if isinstance(value, dict):
                self.load_mapping(value, key)
            elif isinstance(value, bool):
                self.set(key, format_bool(value))
            elif value is None:
                self.set(key, "")
            elif isinstance(value, (list, tuple)):
                raise ValueError(f"Lists are not supported in store seed data (key '{key}')")
            else:
                self.set(key, str(value))

    @classmethod
    def from_yaml(cls, path: Path) -> "InMemoryStore":
        """Create a store seeded from a YAML file of nested mappings."""
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Seed file {path} must contain a mapping at the top level")
        store = cls()
        store.load_mapping(data)
        logger.info("Seeded in-memory store with %d keys from %s", len(store._values), path)
        return store


def build_store(config: Settings) -> KeyValueStore:
    """Create the store selected by the configuration."""
    backend = (config.store_backend or "").strip().lower()
    if backend == STORE_BACKEND_MEMORY:
        seed_path = config.get_seed_file_path()
        if seed_path is not None:
            return InMemoryStore.from_yaml(seed_path)
        return InMemoryStore()
    if backend != STORE_BACKEND_ETCD:
        raise ValueError(
            f"Unsupported store backend '{config.store_backend}'; expected one of: "
            + ", ".join(STORE_BACKENDS)
        )

    logger.info("Using etcd store at %s", config.etcd_url)
    return EtcdStore(config.etcd_url or "", timeout=config.etcd_timeout)


_store: Optional[KeyValueStore] = None
_store_lock = threading.Lock()


def get_store() -> KeyValueStore:
    """Return the process-wide store, creating it from settings on first use."""
    global _store
    with _store_lock:
        if _store is None:
            _store = build_store(settings)
        return _store


def set_store(store: Optional[KeyValueStore]) -> None:
    """Replace the process-wide store; ``None`` resets it to the configured one."""
    global _store
    with _store_lock:
        _store = store
