"""Configuration management using Pydantic settings."""

from pathlib import Path
from typing import Optional, TYPE_CHECKING

from pydantic_settings import BaseSettings

from .namespace import HardwareNamespace


STORE_BACKEND_ETCD = "etcd"
STORE_BACKEND_MEMORY = "memory"
STORE_BACKENDS = (STORE_BACKEND_ETCD, STORE_BACKEND_MEMORY)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application settings
    app_name: str = "Node Inventory Server"
    app_version: str = "0.1.0"
    debug: bool = False

    # Store settings
    store_backend: str = STORE_BACKEND_ETCD  # "etcd" or "memory"
    etcd_url: Optional[str] = "http://127.0.0.1:2379"
    etcd_timeout: float = 10.0  # seconds per etcd request
    memory_store_seed_file: Optional[str] = None  # YAML tree loaded into the memory store

    # Namespace under which every node's hardware is stored
    discovered_nodes_key: str = "/inventory/nodes/discovered"

    # Local node settings
    node_id: Optional[str] = None  # Identity of this machine in the cluster
    discover_on_startup: bool = False

    # Hardware probe settings
    lsblk_path: str = "lsblk"
    command_timeout: float = 30.0  # seconds allowed for a probe command

    class Config:
        env_file = ".env"
        case_sensitive = False

    def get_namespace(self) -> HardwareNamespace:
        """Return the key layout rooted at the discovered nodes key."""
        return HardwareNamespace(root=self.discovered_nodes_key)

    def get_seed_file_path(self) -> Optional[Path]:
        if not self.memory_store_seed_file:
            return None
        return Path(self.memory_store_seed_file)


settings = Settings()


if TYPE_CHECKING:  # pragma: no cover - only for type hints
    from .config_validation import ConfigValidationResult

# Cache of the configuration validation result so it can be reused across modules
_config_validation_result: Optional["ConfigValidationResult"] = None


def set_config_validation_result(result: "ConfigValidationResult") -> None:
    """Persist the configuration validation result for reuse."""

    global _config_validation_result
    _config_validation_result = result


def get_config_validation_result() -> Optional["ConfigValidationResult"]:
    """Return the cached configuration validation result, if available."""

    return _config_validation_result
