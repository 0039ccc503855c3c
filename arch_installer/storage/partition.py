"""Destructive disk preparation.

States move one way only: Unmounted -> Wiped -> Partitioned -> ProbeSettled.
Any failing command raises CommandFailedError and nothing is cleaned up.

Operations:
    - unmount_target(): Best-effort recursive unmount of the mount root
    - wipe_disk(): Erase filesystem and partition-table signatures
    - create_partition_table(): New GPT label
    - create_partitions(): The four fixed partitions, esp flag on #1
    - settle_partitions(): Wait, partprobe, wait
    - prepare_disk(): All of the above, returns the PartitionLayout
"""

from __future__ import annotations

import time

from arch_installer.domain.models import PartitionLayout, PartitionRole
from arch_installer.logging import LoggerFactory
from arch_installer.storage.layout import PARTITION_TABLE, derive_partition_layout
from arch_installer.system.commands import run_checked_command, run_quietly


log = LoggerFactory.for_disk()


def unmount_target(mount_root: str) -> None:
    """Unmount anything left under ``mount_root``; errors are ignored."""
    if not run_quietly(["umount", "-R", mount_root]):
        log.debug(f"Nothing unmounted under {mount_root}")


def wipe_disk(disk: str) -> None:
    log.debug(f"Wiping signatures on {disk}")
    run_checked_command(["wipefs", "-af", disk])


def create_partition_table(disk: str) -> None:
    log.debug(f"Creating GPT partition table on {disk}")
    run_checked_command(["parted", "-s", disk, "mklabel", "gpt"])


def create_partitions(disk: str) -> None:
    for spec in PARTITION_TABLE:
        log.debug(
            f"Creating {spec.role.value} partition {spec.number} "
            f"({spec.start} - {spec.end}) on {disk}"
        )
        run_checked_command(
            ["parted", "-s", disk, "mkpart", "primary", spec.parted_fs, spec.start, spec.end]
        )
        if spec.role is PartitionRole.EFI:
            run_checked_command(["parted", "-s", disk, "set", str(spec.number), "esp", "on"])


def settle_partitions(disk: str, delay: float) -> None:
    """Give udev time to create the nodes, then ask the kernel to re-read."""
    time.sleep(delay)
    run_checked_command(["partprobe", disk])
    time.sleep(delay)


def prepare_disk(disk: str, mount_root: str, settle_delay: float = 2.0) -> PartitionLayout:
    """Wipe and partition ``disk``. Destroys all data on it."""
    unmount_target(mount_root)
    wipe_disk(disk)
    create_partition_table(disk)
    create_partitions(disk)
    log.success(f"Disk {disk} partitioned")
    layout = derive_partition_layout(disk)
    settle_partitions(disk, settle_delay)
    return layout
