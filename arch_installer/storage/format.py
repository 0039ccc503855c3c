"""Filesystem creation for the four installer partitions.

EFI gets FAT32, root and home get ext4, swap gets a swap signature and is
activated straight away so pacstrap can use it.
"""

from __future__ import annotations

from arch_installer.domain.models import PartitionLayout, PartitionRole
from arch_installer.logging import LoggerFactory
from arch_installer.storage.layout import spec_for
from arch_installer.system.commands import run_checked_command


log = LoggerFactory.for_disk()


def _mkfs_command(role: PartitionRole, partition: str) -> list[str]:
    spec = spec_for(role)
    if spec.fstype == "vfat":
        return ["mkfs.fat", "-F32", "-n", spec.label, partition]
    if spec.fstype == "swap":
        return ["mkswap", "-L", spec.label, partition]
    return [f"mkfs.{spec.fstype}", "-L", spec.label, partition]


def format_partition(role: PartitionRole, partition: str) -> None:
    log.debug(f"Formatting {role.value} partition {partition}")
    run_checked_command(_mkfs_command(role, partition))


def format_partitions(layout: PartitionLayout) -> None:
    """Format every partition of ``layout`` and enable swap."""
    for role in (PartitionRole.EFI, PartitionRole.ROOT, PartitionRole.HOME, PartitionRole.SWAP):
        format_partition(role, layout.path_for(role))
    run_checked_command(["swapon", layout.swap])
    log.success("Partitions formatted")
