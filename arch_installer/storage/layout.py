"""Fixed GPT partition layout and partition device naming.

Layout (contiguous, fixed offsets, no sizing from actual capacity):

    1  EFI   1MiB      - 513MiB     fat32  (esp flag)
    2  ROOT  513MiB    - 200.5GiB   ext4
    3  SWAP  200.5GiB  - 216.5GiB   linux-swap
    4  HOME  216.5GiB  - 100%       ext4

Naming:
    Disks whose path contains "nvme" name partitions with a "p" separator
    (/dev/nvme0n1 -> /dev/nvme0n1p1); every other disk gets a bare number
    (/dev/sda -> /dev/sda1).
"""

from __future__ import annotations

import re

from arch_installer.domain.models import PartitionLayout, PartitionRole, PartitionSpec
from arch_installer.exceptions import DiskTooSmallError

PARTITION_TABLE: tuple[PartitionSpec, ...] = (
    PartitionSpec(PartitionRole.EFI, 1, "fat32", "1MiB", "513MiB", "vfat", "EFI"),
    PartitionSpec(PartitionRole.ROOT, 2, "ext4", "513MiB", "200.5GiB", "ext4", "ROOT"),
    PartitionSpec(
        PartitionRole.SWAP, 3, "linux-swap", "200.5GiB", "216.5GiB", "swap", "SWAP"
    ),
    PartitionSpec(PartitionRole.HOME, 4, "ext4", "216.5GiB", "100%", "ext4", "HOME"),
)

# Smallest home partition accepted when checking disk capacity.
MIN_HOME_BYTES = 1024**3

_UNITS = {"B": 1, "KiB": 1024, "MiB": 1024**2, "GiB": 1024**3, "TiB": 1024**4}
_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?)(B|KiB|MiB|GiB|TiB)$")


def parse_size(value: str) -> int:
    """Convert a parted offset such as "200.5GiB" to bytes."""
    match = _SIZE_RE.match(value.strip())
    if not match:
        raise ValueError(f"Unsupported size: {value}")
    return int(float(match.group(1)) * _UNITS[match.group(2)])


def partition_path(disk: str, number: int) -> str:
    if "nvme" in disk:
        return f"{disk}p{number}"
    return f"{disk}{number}"


def derive_partition_layout(disk: str) -> PartitionLayout:
    paths = {spec.role: partition_path(disk, spec.number) for spec in PARTITION_TABLE}
    return PartitionLayout(
        disk=disk,
        efi=paths[PartitionRole.EFI],
        root=paths[PartitionRole.ROOT],
        swap=paths[PartitionRole.SWAP],
        home=paths[PartitionRole.HOME],
    )


def spec_for(role: PartitionRole) -> PartitionSpec:
    for spec in PARTITION_TABLE:
        if spec.role is role:
            return spec
    raise KeyError(role)


def required_disk_bytes() -> int:
    """Bytes needed for the fixed partitions plus a minimal home."""
    fixed_end = max(
        parse_size(spec.end) for spec in PARTITION_TABLE if not spec.end.endswith("%")
    )
    return fixed_end + MIN_HOME_BYTES


def validate_disk_capacity(disk: str, size_bytes: int) -> None:
    """Reject disks that cannot hold the fixed layout.

    Raises:
        DiskTooSmallError: If ``size_bytes`` is below required_disk_bytes()
    """
    required = required_disk_bytes()
    if size_bytes < required:
        raise DiskTooSmallError(disk, size_bytes, required)
