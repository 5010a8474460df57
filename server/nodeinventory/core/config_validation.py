"""Configuration validation utilities."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .config import (
    STORE_BACKEND_ETCD,
    STORE_BACKEND_MEMORY,
    STORE_BACKENDS,
    settings,
    set_config_validation_result,
    get_config_validation_result,
)


@dataclass
class ConfigIssue:
    message: str
    hint: Optional[str] = None


@dataclass
class ConfigValidationResult:
    """Errors block store setup and readiness; warnings are only logged."""

    errors: List[ConfigIssue] = field(default_factory=list)
    warnings: List[ConfigIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def error(self, message: str, hint: Optional[str] = None) -> None:
        self.errors.append(ConfigIssue(message, hint))

    def warn(self, message: str, hint: Optional[str] = None) -> None:
        self.warnings.append(ConfigIssue(message, hint))


def run_config_checks(force: bool = False) -> ConfigValidationResult:
    """Validate configuration combinations and cache the result."""

    if not force:
        cached = get_config_validation_result()
        if cached is not None:
            return cached

    result = ConfigValidationResult()

    backend = (settings.store_backend or "").strip().lower()
    if backend not in STORE_BACKENDS:
        result.error(
            f"STORE_BACKEND '{settings.store_backend}' is not supported.",
            "Use one of: " + ", ".join(STORE_BACKENDS) + ".",
        )
    elif backend == STORE_BACKEND_ETCD and not (settings.etcd_url or "").strip():
        result.error(
            "ETCD_URL is required when the etcd store backend is selected.",
            "Set ETCD_URL to the client URL of the etcd cluster (e.g., http://etcd:2379).",
        )
    elif backend == STORE_BACKEND_MEMORY:
        result.warn(
            "The in-memory store backend is enabled; inventory is lost on restart.",
            "Only use STORE_BACKEND=memory for development and tests.",
        )

    seed_path = settings.get_seed_file_path()
    if seed_path is not None:
        if backend != STORE_BACKEND_MEMORY:
            result.warn(
                "MEMORY_STORE_SEED_FILE is set but the memory backend is not selected.",
                "The seed file is only read when STORE_BACKEND=memory.",
            )
        elif not seed_path.is_file():
            result.error(
                f"MEMORY_STORE_SEED_FILE '{seed_path}' does not exist.",
                "Point MEMORY_STORE_SEED_FILE at a readable YAML file.",
            )

    if not settings.discovered_nodes_key.startswith("/"):
        result.error(
            "DISCOVERED_NODES_KEY must be an absolute key.",
            "Prefix DISCOVERED_NODES_KEY with '/', e.g. /inventory/nodes/discovered.",
        )

    if not settings.node_id:
        if settings.discover_on_startup:
            result.error(
                "DISCOVER_ON_STARTUP is enabled but NODE_ID is not set.",
                "Set NODE_ID to the identity of this machine in the cluster.",
            )
        else:
            result.warn(
                "NODE_ID is not set; this server cannot identify its own node.",
                "Set NODE_ID if this machine's hardware should be discovered.",
            )

    if settings.command_timeout <= 0:
        result.error(
            "COMMAND_TIMEOUT must be greater than zero.",
        )

    set_config_validation_result(result)
    return result
