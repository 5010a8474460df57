"""Data models for the application."""
from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class DiskConfig(BaseModel):
    """Block device reported by the disk probe."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Kernel device name, also the disk's key segment")
    size: int = Field(0, ge=0, description="Size in bytes")
    rotational: bool = False
    readonly: bool = False
    type: str = Field("", description="Device type as reported by lsblk (disk, part)")
    filesystem: str = ""
    mountpoint: str = ""
    has_children: bool = Field(False, description="True when partitions or holders sit on top of the device")


class ProcessorConfig(BaseModel):
    """One logical processor."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=0, description="Processor ordinal, taken from its key segment")
    physical_id: int = Field(0, ge=0)
    siblings: int = Field(0, ge=0)
    core_id: int = Field(0, ge=0)
    num_cores: int = Field(0, ge=0)
    speed: float = Field(0.0, description="Clock speed in MHz")
    bits: int = Field(0, ge=0, description="Word width")


class MemoryConfig(BaseModel):
    """Memory installed in a node."""

    model_config = ConfigDict(frozen=True)

    total_size: int = Field(0, ge=0, description="Total memory in bytes")


class NetworkConfig(BaseModel):
    """One network adapter."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Adapter name, also its key segment")
    ipv4_address: str = ""
    ipv6_address: str = ""
    speed: int = Field(0, ge=0, description="Link speed; 0 when unknown")


class NodeConfig(BaseModel):
    """Hardware inventory of a single cluster node.

    The node id is not part of the record; it is the key the record is
    stored under.
    """

    model_config = ConfigDict(frozen=True)

    ip_address: str = ""
    disks: List[DiskConfig] = Field(default_factory=list)
    processors: List[ProcessorConfig] = Field(default_factory=list)
    memory: MemoryConfig = Field(default_factory=MemoryConfig)
    network_adapters: List[NetworkConfig] = Field(default_factory=list)


class IPAddressRecord(BaseModel):
    """IP address of a node."""
    node_id: str
    ip_address: str


class IPAddressUpdateRequest(BaseModel):
    """Request to set the IP address of a node."""
    ip_address: str = Field(..., min_length=1, description="Address the node is reachable on")


class DiscoveryResult(BaseModel):
    """Outcome of a hardware discovery run."""
    node_id: str
    disks: List[DiskConfig] = Field(default_factory=list)


class NodesResponse(BaseModel):
    """Inventory of every discovered node."""
    nodes: Dict[str, NodeConfig] = Field(default_factory=dict)
    total_count: int = 0


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: datetime
