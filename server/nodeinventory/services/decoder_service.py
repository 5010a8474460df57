"""Decode node hardware subtrees fetched from the store into NodeConfig models.

A node subtree is dispatched category by category. Every category parser
returns the NodeConfig fields it owns, sequences are pre-sized to the
number of children and filled in store order. Unknown categories and
properties are logged and skipped; malformed values and unexpected
directory/leaf shapes raise and abort the node.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.converters import UINT32_BITS, UINT64_BITS, parse_bool, parse_float, parse_uint
from ..core.errors import HardwareDecodeError, InvalidShapeError, MissingDataError
from ..core.models import DiskConfig, MemoryConfig, NetworkConfig, NodeConfig, ProcessorConfig
from ..core.namespace import (
    DISK_FILESYSTEM_KEY,
    DISK_HAS_CHILDREN_KEY,
    DISK_MOUNTPOINT_KEY,
    DISK_READONLY_KEY,
    DISK_ROTATIONAL_KEY,
    DISK_SIZE_KEY,
    DISK_TYPE_KEY,
    DISKS_KEY,
    IP_ADDRESS_KEY,
    MEMORY_KEY,
    MEMORY_TOTAL_SIZE_KEY,
    NETWORK_IPV4_ADDRESS_KEY,
    NETWORK_IPV6_ADDRESS_KEY,
    NETWORK_KEY,
    NETWORK_SPEED_KEY,
    PROC_BITS_KEY,
    PROC_CORE_ID_KEY,
    PROC_NUM_CORES_KEY,
    PROC_PHYSICAL_ID_KEY,
    PROC_SIBLINGS_KEY,
    PROC_SPEED_KEY,
    PROCESSORS_KEY,
)
from ..core.tree import StoreNode

logger = logging.getLogger(__name__)


Converter = Callable[[str, str], Any]


def _uint32(key: str, text: str) -> int:
    return parse_uint(key, text, UINT32_BITS)


def _uint64(key: str, text: str) -> int:
    return parse_uint(key, text, UINT64_BITS)


def _text(key: str, text: str) -> str:
    return text


def _uint64_or_zero(key: str, text: str) -> int:
    # Adapters without a link report an empty speed
    if text == "":
        return 0
    return parse_uint(key, text, UINT64_BITS)


# property name -> (model field, converter)
DISK_PROPERTIES: Dict[str, Tuple[str, Converter]] = {
    DISK_SIZE_KEY: ("size", _uint64),
    DISK_ROTATIONAL_KEY: ("rotational", parse_bool),
    DISK_READONLY_KEY: ("readonly", parse_bool),
    DISK_TYPE_KEY: ("type", _text),
    DISK_FILESYSTEM_KEY: ("filesystem", _text),
    DISK_MOUNTPOINT_KEY: ("mountpoint", _text),
    DISK_HAS_CHILDREN_KEY: ("has_children", parse_bool),
}

PROCESSOR_PROPERTIES: Dict[str, Tuple[str, Converter]] = {
    PROC_PHYSICAL_ID_KEY: ("physical_id", _uint32),
    PROC_SIBLINGS_KEY: ("siblings", _uint32),
    PROC_CORE_ID_KEY: ("core_id", _uint32),
    PROC_NUM_CORES_KEY: ("num_cores", _uint32),
    PROC_SPEED_KEY: ("speed", parse_float),
    PROC_BITS_KEY: ("bits", _uint32),
}

MEMORY_PROPERTIES: Dict[str, Tuple[str, Converter]] = {
    MEMORY_TOTAL_SIZE_KEY: ("total_size", _uint64),
}

NETWORK_PROPERTIES: Dict[str, Tuple[str, Converter]] = {
    NETWORK_IPV4_ADDRESS_KEY: ("ipv4_address", _text),
    NETWORK_IPV6_ADDRESS_KEY: ("ipv6_address", _text),
    NETWORK_SPEED_KEY: ("speed", _uint64_or_zero),
}


def _require_dir(node: StoreNode, what: str) -> None:
    if not node.dir:
        raise InvalidShapeError(
            node.key, f"{what} node '{node.key}' is a key, but it's expected to be a directory"
        )


def _require_leaf(node: StoreNode, what: str) -> None:
    if node.dir:
        raise InvalidShapeError(
            node.key, f"{what} node '{node.key}' is a directory, but it's expected to be a key"
        )


def _parse_properties(
    entity: StoreNode,
    properties: Dict[str, Tuple[str, Converter]],
    kind: str,
) -> Dict[str, Any]:
    """Convert the known leaf properties of an entity, skipping unknown ones."""
    fields: Dict[str, Any] = {}
    for prop in entity.children:
        entry = properties.get(prop.name)
        if entry is None:
            logger.warning("Unknown %s property key %s, skipping", kind, prop.key)
            continue
        _require_leaf(prop, f"{kind} property")
        field_name, convert = entry
        fields[field_name] = convert(prop.key, prop.value or "")
    return fields


def decode_disk(disk_node: StoreNode) -> DiskConfig:
    """Decode one disk record written by the disk probe."""
    _require_dir(disk_node, "Disk")
    fields = _parse_properties(disk_node, DISK_PROPERTIES, "disk")
    return DiskConfig(name=disk_node.name, **fields)


def parse_disks(disks_root: StoreNode) -> Dict[str, Any]:
    _require_dir(disks_root, "Disks")
    disks: List[Optional[DiskConfig]] = [None] * len(disks_root.children)
    for index, disk_node in enumerate(disks_root.children):
        try:
            disks[index] = decode_disk(disk_node)
        except HardwareDecodeError as exc:
            logger.error("Failed to decode disk %d (%s): %s", index, disk_node.key, exc)
            raise
    return {"disks": disks}


def parse_processors(procs_root: StoreNode) -> Dict[str, Any]:
    _require_dir(procs_root, "Processors")
    processors: List[Optional[ProcessorConfig]] = [None] * len(procs_root.children)
    for index, proc_node in enumerate(procs_root.children):
        proc_id = _uint32(proc_node.key, proc_node.name)
        _require_dir(proc_node, "Processor")
        fields = _parse_properties(proc_node, PROCESSOR_PROPERTIES, "processor")
        processors[index] = ProcessorConfig(id=proc_id, **fields)
    return {"processors": processors}


def parse_memory(memory_root: StoreNode) -> Dict[str, Any]:
    _require_dir(memory_root, "Memory")
    fields = _parse_properties(memory_root, MEMORY_PROPERTIES, "memory")
    return {"memory": MemoryConfig(**fields)}


def parse_network(network_root: StoreNode) -> Dict[str, Any]:
    _require_dir(network_root, "Network")
    adapters: List[Optional[NetworkConfig]] = [None] * len(network_root.children)
    for index, adapter_node in enumerate(network_root.children):
        _require_dir(adapter_node, "Network adapter")
        fields = _parse_properties(adapter_node, NETWORK_PROPERTIES, "network adapter")
        adapters[index] = NetworkConfig(name=adapter_node.name, **fields)
    return {"network_adapters": adapters}


def parse_ip_address(ip_node: StoreNode) -> Dict[str, Any]:
    _require_leaf(ip_node, "IP address")
    return {"ip_address": ip_node.value or ""}


CATEGORY_PARSERS: Dict[str, Callable[[StoreNode], Dict[str, Any]]] = {
    DISKS_KEY: parse_disks,
    PROCESSORS_KEY: parse_processors,
    MEMORY_KEY: parse_memory,
    NETWORK_KEY: parse_network,
    IP_ADDRESS_KEY: parse_ip_address,
}


def decode_node_config(node_id: str, root: Optional[StoreNode]) -> NodeConfig:
    """Build the NodeConfig of ``node_id`` from its recursively fetched subtree.

    Raises:
        MissingDataError: the subtree is absent
        InvalidShapeError: a key has the wrong directory/leaf shape
        MalformedFieldError: a recognised value fails conversion

    The raised error carries ``node_id``.
    """
    try:
        if root is None:
            raise MissingDataError(f"hardware info missing for node {node_id}")
        _require_dir(root, "Node")

        fields: Dict[str, Any] = {}
        for category_node in root.children:
            category = category_node.name
            parser = CATEGORY_PARSERS.get(category)
            if parser is None:
                logger.warning(
                    "Unexpected hardware component %s for node %s, skipping",
                    category_node.key,
                    node_id,
                )
                continue
            try:
                fields.update(parser(category_node))
            except HardwareDecodeError as exc:
                logger.error(
                    "Failed to load %s config for node %s: %s", category, node_id, exc
                )
                raise
    except HardwareDecodeError as exc:
        exc.node_id = node_id
        raise

    return NodeConfig(**fields)
