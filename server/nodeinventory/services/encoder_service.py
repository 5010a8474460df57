"""Write inventory models back to the store as individual leaf keys.

This is the inverse of decoder_service: decoding what these functions
write yields the same field values.
"""

import logging
from typing import Iterable

from ..core.converters import format_bool, format_float, format_uint
from ..core.keypath import compose_key
from ..core.models import DiskConfig, MemoryConfig, NetworkConfig, NodeConfig, ProcessorConfig
from ..core.namespace import (
    DISK_FILESYSTEM_KEY,
    DISK_HAS_CHILDREN_KEY,
    DISK_MOUNTPOINT_KEY,
    DISK_READONLY_KEY,
    DISK_ROTATIONAL_KEY,
    DISK_SIZE_KEY,
    DISK_TYPE_KEY,
    MEMORY_TOTAL_SIZE_KEY,
    NETWORK_IPV4_ADDRESS_KEY,
    NETWORK_IPV6_ADDRESS_KEY,
    NETWORK_SPEED_KEY,
    PROC_BITS_KEY,
    PROC_CORE_ID_KEY,
    PROC_NUM_CORES_KEY,
    PROC_PHYSICAL_ID_KEY,
    PROC_SIBLINGS_KEY,
    PROC_SPEED_KEY,
    HardwareNamespace,
)
from .store_service import KeyValueStore

logger = logging.getLogger(__name__)


def write_disks(
    store: KeyValueStore,
    namespace: HardwareNamespace,
    node_id: str,
    disks: Iterable[DiskConfig],
) -> None:
    for disk in disks:
        disk_key = namespace.disk_key(node_id, disk.name)
        logger.debug("Writing disk %s for node %s", disk.name, node_id)
        store.set(compose_key(disk_key, DISK_SIZE_KEY), format_uint(disk.size))
        store.set(compose_key(disk_key, DISK_ROTATIONAL_KEY), format_bool(disk.rotational))
        store.set(compose_key(disk_key, DISK_READONLY_KEY), format_bool(disk.readonly))
        store.set(compose_key(disk_key, DISK_TYPE_KEY), disk.type)
        store.set(compose_key(disk_key, DISK_FILESYSTEM_KEY), disk.filesystem)
        store.set(compose_key(disk_key, DISK_MOUNTPOINT_KEY), disk.mountpoint)
        store.set(compose_key(disk_key, DISK_HAS_CHILDREN_KEY), format_bool(disk.has_children))


def write_processors(
    store: KeyValueStore,
    namespace: HardwareNamespace,
    node_id: str,
    processors: Iterable[ProcessorConfig],
) -> None:
    for proc in processors:
        proc_key = namespace.processor_key(node_id, proc.id)
        store.set(compose_key(proc_key, PROC_PHYSICAL_ID_KEY), format_uint(proc.physical_id))
        store.set(compose_key(proc_key, PROC_SIBLINGS_KEY), format_uint(proc.siblings))
        store.set(compose_key(proc_key, PROC_CORE_ID_KEY), format_uint(proc.core_id))
        store.set(compose_key(proc_key, PROC_NUM_CORES_KEY), format_uint(proc.num_cores))
        store.set(compose_key(proc_key, PROC_SPEED_KEY), format_float(proc.speed))
        store.set(compose_key(proc_key, PROC_BITS_KEY), format_uint(proc.bits))


def write_memory(
    store: KeyValueStore,
    namespace: HardwareNamespace,
    node_id: str,
    memory: MemoryConfig,
) -> None:
    store.set(
        compose_key(namespace.memory_key(node_id), MEMORY_TOTAL_SIZE_KEY),
        format_uint(memory.total_size),
    )


def write_network_adapters(
    store: KeyValueStore,
    namespace: HardwareNamespace,
    node_id: str,
    adapters: Iterable[NetworkConfig],
) -> None:
    for adapter in adapters:
        adapter_key = namespace.network_key(node_id, adapter.name)
        store.set(compose_key(adapter_key, NETWORK_IPV4_ADDRESS_KEY), adapter.ipv4_address)
        store.set(compose_key(adapter_key, NETWORK_IPV6_ADDRESS_KEY), adapter.ipv6_address)
        store.set(compose_key(adapter_key, NETWORK_SPEED_KEY), format_uint(adapter.speed))


def save_node_config(
    store: KeyValueStore,
    namespace: HardwareNamespace,
    node_id: str,
    config: NodeConfig,
) -> None:
    """Write every category of a NodeConfig, plus its IP address, under the node key."""
    logger.info("Saving hardware config for node %s", node_id)
    store.set(namespace.ip_address_key(node_id), config.ip_address)
    write_disks(store, namespace, node_id, config.disks)
    write_processors(store, namespace, node_id, config.processors)
    write_memory(store, namespace, node_id, config.memory)
    write_network_adapters(store, namespace, node_id, config.network_adapters)
