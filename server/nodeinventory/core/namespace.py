"""Key layout of the discovered-nodes namespace.

Every key the services read or write is built here::

    <root>/<node>/ipaddress
    <root>/<node>/disks/<name>/{size,rotational,readonly,type,filesystem,mountpoint,haschildren}
    <root>/<node>/cpu/<ordinal>/{physicalid,siblings,coreid,numcores,speed,bits}
    <root>/<node>/mem/totalsize
    <root>/<node>/net/<adapter>/{ipv4address,ipv6address,speed}
"""

from __future__ import annotations

from dataclasses import dataclass

from .keypath import compose_key


# Categories directly under a node key
IP_ADDRESS_KEY = "ipaddress"
DISKS_KEY = "disks"
PROCESSORS_KEY = "cpu"
MEMORY_KEY = "mem"
NETWORK_KEY = "net"

# Disk properties
DISK_SIZE_KEY = "size"
DISK_ROTATIONAL_KEY = "rotational"
DISK_READONLY_KEY = "readonly"
DISK_TYPE_KEY = "type"
DISK_FILESYSTEM_KEY = "filesystem"
DISK_MOUNTPOINT_KEY = "mountpoint"
DISK_HAS_CHILDREN_KEY = "haschildren"

# Processor properties
PROC_PHYSICAL_ID_KEY = "physicalid"
PROC_SIBLINGS_KEY = "siblings"
PROC_CORE_ID_KEY = "coreid"
PROC_NUM_CORES_KEY = "numcores"
PROC_SPEED_KEY = "speed"
PROC_BITS_KEY = "bits"

# Memory properties
MEMORY_TOTAL_SIZE_KEY = "totalsize"

# Network adapter properties
NETWORK_IPV4_ADDRESS_KEY = "ipv4address"
NETWORK_IPV6_ADDRESS_KEY = "ipv6address"
NETWORK_SPEED_KEY = "speed"


@dataclass(frozen=True)
class HardwareNamespace:
    """Builds store keys for node hardware below a fixed root."""

    root: str

    @property
    def nodes_root(self) -> str:
        return compose_key(self.root)

    def node_key(self, node_id: str) -> str:
        """Key under which all hardware of a node is stored."""
        return compose_key(self.root, node_id)

    def category_key(self, node_id: str, category: str) -> str:
        return compose_key(self.node_key(node_id), category)

    def ip_address_key(self, node_id: str) -> str:
        return self.category_key(node_id, IP_ADDRESS_KEY)

    def disk_key(self, node_id: str, disk_name: str) -> str:
        return compose_key(self.category_key(node_id, DISKS_KEY), disk_name)

    def processor_key(self, node_id: str, ordinal: int) -> str:
        return compose_key(self.category_key(node_id, PROCESSORS_KEY), str(ordinal))

    def memory_key(self, node_id: str) -> str:
        return self.category_key(node_id, MEMORY_KEY)

    def network_key(self, node_id: str, adapter_name: str) -> str:
        return compose_key(self.category_key(node_id, NETWORK_KEY), adapter_name)
