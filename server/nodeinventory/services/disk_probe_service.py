"""Disk discovery through ``lsblk`` and the disk write path."""

import logging
import shlex
from typing import Dict, List

from ..core.converters import parse_uint
from ..core.errors import MalformedFieldError
from ..core.models import DiskConfig
from ..core.namespace import HardwareNamespace
from .encoder_service import write_disks
from .executor_service import CommandExecutor
from .store_service import KeyValueStore

logger = logging.getLogger(__name__)


LSBLK_COLUMNS = "NAME,SIZE,ROTA,RO,TYPE,FSTYPE,MOUNTPOINT,PKNAME"
DISCOVERED_DEVICE_TYPES = ("disk", "part")


class DiskProbeError(RuntimeError):
    """Raised when the probe output cannot be interpreted."""


def parse_lsblk_pairs(line: str) -> Dict[str, str]:
    """Parse one line of `lsblk --pairs` output into a column dict.

    Values are shell quoted, so `NAME="sda1" MOUNTPOINT="/mnt/my disk"` gives
    `{"NAME": "sda1", "MOUNTPOINT": "/mnt/my disk"}`.
    """
    try:
        tokens = shlex.split(line)
    except ValueError as exc:
        raise DiskProbeError(f"Unparsable probe output line {line!r}: {exc}") from exc

    props: Dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if sep and key:
            props[key] = value
    return props


def build_lsblk_command(lsblk_path: str) -> List[str]:
    return [lsblk_path, "--all", "--bytes", "--pairs", "--output", LSBLK_COLUMNS]


def probe_disks(executor: CommandExecutor, lsblk_path: str = "lsblk") -> List[DiskConfig]:
    """Enumerate the block devices of this machine."""
    output = executor.run_command(build_lsblk_command(lsblk_path))
    rows = [parse_lsblk_pairs(line) for line in output.splitlines() if line.strip()]

    parents = {row["PKNAME"] for row in rows if row.get("PKNAME")}

    disks: List[DiskConfig] = []
    seen = set()
    for row in rows:
        name = row.get("NAME", "")
        device_type = row.get("TYPE", "")
        if not name or device_type not in DISCOVERED_DEVICE_TYPES:
            logger.debug("Ignoring block device %r of type %r", name, device_type)
            continue
        if name in seen:
            continue
        seen.add(name)

        try:
            size = parse_uint("SIZE", row.get("SIZE") or "0")
        except MalformedFieldError as exc:
            raise DiskProbeError(f"Invalid size reported for disk {name}: {exc}") from exc

        disks.append(
            DiskConfig(
                name=name,
                size=size,
                rotational=row.get("ROTA") == "1",
                readonly=row.get("RO") == "1",
                type=device_type,
                filesystem=row.get("FSTYPE", ""),
                mountpoint=row.get("MOUNTPOINT", ""),
                has_children=name in parents,
            )
        )

    logger.info("Probe found %d disks", len(disks))
    return disks


def discover_disks(
    node_id: str,
    store: KeyValueStore,
    namespace: HardwareNamespace,
    executor: CommandExecutor,
    lsblk_path: str = "lsblk",
) -> List[DiskConfig]:
    """Probe local disks and write them under the node's disks key."""
    disks = probe_disks(executor, lsblk_path)
    write_disks(store, namespace, node_id, disks)
    logger.info("Stored %d disks for node %s", len(disks), node_id)
    return disks
