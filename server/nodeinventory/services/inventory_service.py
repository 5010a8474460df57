"""Inventory loading for every discovered node.

A node load runs three steps: fetch the node subtree, decode it and read
the node's IP address. Each step yields a StepResult; when a step fails
the LOAD_FAILURE_POLICY table decides whether the node is skipped, loaded
with an empty hardware record, or the whole load is aborted.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Type

from ..core.config import settings
from ..core.errors import HardwareDecodeError
from ..core.models import NodeConfig
from ..core.namespace import HardwareNamespace
from .decoder_service import decode_node_config
from .ip_address_service import IPAddressService
from .store_service import KeyNotFoundError, KeyValueStore, StoreError, get_store

logger = logging.getLogger(__name__)


class LoadStep(str, Enum):
    """Steps of a single node load."""
    FETCH = "fetch"
    DECODE = "decode"
    IP_ADDRESS = "ip_address"


class StepOutcome(str, Enum):
    """What the load does after a step."""
    SUCCESS = "success"
    SKIP = "skip"
    FALLBACK = "fallback"
    ABORT = "abort"


# (step, error class) -> outcome. Lookups walk the error's MRO, so the most
# specific entry wins; failures not listed here abort the load.
LOAD_FAILURE_POLICY: Dict[Tuple[LoadStep, Type[BaseException]], StepOutcome] = {
    # A node with no hardware discovered yet is a normal state.
    (LoadStep.FETCH, KeyNotFoundError): StepOutcome.SKIP,
    # An unreadable hardware subtree still yields an IP-only record.
    (LoadStep.FETCH, StoreError): StepOutcome.FALLBACK,
    # Corrupt hardware records fail the whole inventory.
    (LoadStep.DECODE, HardwareDecodeError): StepOutcome.ABORT,
    (LoadStep.IP_ADDRESS, StoreError): StepOutcome.ABORT,
}


def resolve_failure(step: LoadStep, error: BaseException) -> StepOutcome:
    """Look up the outcome of a failed step in LOAD_FAILURE_POLICY."""
    for error_class in type(error).__mro__:
        outcome = LOAD_FAILURE_POLICY.get((step, error_class))
        if outcome is not None:
            return outcome
    return StepOutcome.ABORT


@dataclass(frozen=True)
class StepResult:
    """Result of one node load step."""

    step: LoadStep
    outcome: StepOutcome
    value: Any = None
    error: Optional[Exception] = None


def run_step(step: LoadStep, func: Callable[..., Any], *args: Any) -> StepResult:
    try:
        value = func(*args)
    except Exception as exc:
        return StepResult(step=step, outcome=resolve_failure(step, exc), error=exc)
    return StepResult(step=step, outcome=StepOutcome.SUCCESS, value=value)


class InventoryService:
    """Service for loading the hardware inventory of cluster nodes."""

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

    @property
    def ip_addresses(self) -> IPAddressService:
        return IPAddressService(store=self.store, namespace=self.namespace)

    def load_all(self) -> Dict[str, NodeConfig]:
        """Load the hardware config of every discovered node.

        Returns a mapping of node id to NodeConfig. Either every node that
        was not skipped is present, or the first aborting error is raised
        and nothing is returned.
        """
        try:
            node_ids = self.store.list_children(self.namespace.nodes_root)
        except StoreError as exc:
            logger.error("Failed to get the node ids: %s", exc)
            raise
        logger.info("Discovered %d nodes", len(node_ids))

        nodes: Dict[str, NodeConfig] = {}
        for node_id in node_ids:
            config = self._load_node_with_policy(node_id)
            if config is not None:
                nodes[node_id] = config

        logger.info("Loaded hardware config for %d of %d nodes", len(nodes), len(node_ids))
        return nodes

    def load_node(self, node_id: str) -> NodeConfig:
        """Load a single node; every error is raised to the caller."""
        tree = self.store.get_tree(self.namespace.node_key(node_id))
        config = decode_node_config(node_id, tree)
        ip_address = self.ip_addresses.get(node_id)
        return config.model_copy(update={"ip_address": ip_address})

    def _load_node_with_policy(self, node_id: str) -> Optional[NodeConfig]:
        fetched = run_step(LoadStep.FETCH, self.store.get_tree, self.namespace.node_key(node_id))
        if fetched.outcome is StepOutcome.FALLBACK:
            logger.warning(
                "Failed to fetch hardware of node %s, keeping its IP address only: %s",
                node_id,
                fetched.error,
            )
            config = NodeConfig()
        elif self._should_continue(node_id, fetched):
            decoded = run_step(LoadStep.DECODE, decode_node_config, node_id, fetched.value)
            if not self._should_continue(node_id, decoded):
                return None
            config = decoded.value
        else:
            return None

        # The dedicated IP address key wins over the value decoded from the tree
        ip_address = run_step(LoadStep.IP_ADDRESS, self.ip_addresses.get, node_id)
        if not self._should_continue(node_id, ip_address):
            return None

        return config.model_copy(update={"ip_address": ip_address.value})

    @staticmethod
    def _should_continue(node_id: str, result: StepResult) -> bool:
        if result.outcome is StepOutcome.SUCCESS:
            return True

        if result.outcome is StepOutcome.SKIP:
            logger.info("Skipping node %s with no hardware discovered: %s", node_id, result.error)
            return False

        logger.error(
            "Aborting inventory load at node %s after %s failure: %s",
            node_id,
            result.step.value,
            result.error,
        )
        raise result.error


inventory_service = InventoryService()
