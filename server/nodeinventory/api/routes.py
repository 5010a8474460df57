"""API route handlers."""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, TypeVar

from fastapi import APIRouter, HTTPException, Response, status

from ..core.config import settings, get_config_validation_result
from ..core.errors import HardwareDecodeError
from ..core.models import (
    DiscoveryResult,
    HealthResponse,
    IPAddressRecord,
    IPAddressUpdateRequest,
    NodeConfig,
    NodesResponse,
)
from ..services.discovery_service import discovery_service
from ..services.executor_service import CommandExecutionError
from ..services.disk_probe_service import DiskProbeError
from ..services.inventory_service import inventory_service
from ..services.ip_address_service import ip_address_service
from ..services.store_service import KeyNotFoundError, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

router = APIRouter()


async def _call_service(operation: str, func: Callable[..., T], *args) -> T:
    """Run a blocking service call in a worker thread and map its errors."""
    try:
        return await asyncio.to_thread(func, *args)
    except KeyNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except HardwareDecodeError as exc:
        logger.error("%s failed: corrupt hardware record for node %s: %s", operation, exc.node_id, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "node_id": exc.node_id},
        ) from exc
    except StoreError as exc:
        logger.error("%s failed: %s", operation, exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except (CommandExecutionError, DiskProbeError) as exc:
        logger.error("%s failed: %s", operation, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


@router.get("/healthz", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/readyz", response_model=HealthResponse, tags=["Health"])
async def readiness_check(response: Response):
    """Readiness check endpoint."""

    config_result = get_config_validation_result()
    readiness_status = "ready"
    response.status_code = status.HTTP_200_OK
    if config_result and config_result.has_errors:
        readiness_status = "config_error"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status=readiness_status,
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/api/v1/nodes", response_model=NodesResponse, tags=["Nodes"])
async def list_nodes():
    """Return the hardware inventory of every discovered node."""
    nodes = await _call_service("Inventory load", inventory_service.load_all)
    return NodesResponse(nodes=nodes, total_count=len(nodes))


@router.get("/api/v1/nodes/{node_id}", response_model=NodeConfig, tags=["Nodes"])
async def get_node(node_id: str):
    return await _call_service(f"Loading node {node_id}", inventory_service.load_node, node_id)


@router.get("/api/v1/nodes/{node_id}/ipaddress", response_model=IPAddressRecord, tags=["Nodes"])
async def get_node_ip_address(node_id: str):
    ip_address = await _call_service(
        f"Reading IP address of {node_id}", ip_address_service.get, node_id
    )
    return IPAddressRecord(node_id=node_id, ip_address=ip_address)


@router.put("/api/v1/nodes/{node_id}/ipaddress", response_model=IPAddressRecord, tags=["Nodes"])
async def set_node_ip_address(node_id: str, record: IPAddressUpdateRequest):
    await _call_service(
        f"Setting IP address of {node_id}", ip_address_service.set, node_id, record.ip_address
    )
    return IPAddressRecord(node_id=node_id, ip_address=record.ip_address)


@router.post(
    "/api/v1/nodes/{node_id}/discover",
    response_model=DiscoveryResult,
    tags=["Discovery"],
)
async def discover_node_hardware(node_id: str):
    """Probe this machine's hardware and store it under ``node_id``."""
    return await _call_service(f"Discovery for {node_id}", discovery_service.discover, node_id)
