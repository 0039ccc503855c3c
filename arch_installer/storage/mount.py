"""Mount assembly for the target tree.

Root is mounted first; boot and home mount points are created inside it.
There is no guard against an already-mounted target, mount reports that
itself and the run stops.
"""

from __future__ import annotations

from pathlib import Path

from arch_installer.domain.models import PartitionLayout
from arch_installer.logging import LoggerFactory
from arch_installer.system.commands import run_checked_command


log = LoggerFactory.for_disk()


def mount_partitions(layout: PartitionLayout, mount_root: str) -> None:
    root = Path(mount_root)
    run_checked_command(["mount", layout.root, str(root)])
    boot = root / "boot"
    home = root / "home"
    boot.mkdir(parents=True, exist_ok=True)
    home.mkdir(parents=True, exist_ok=True)
    run_checked_command(["mount", layout.efi, str(boot)])
    run_checked_command(["mount", layout.home, str(home)])
    log.success(f"Partitions mounted under {root}")


def unmount_all(mount_root: str) -> None:
    """Recursively unmount the target; failure is fatal."""
    run_checked_command(["umount", "-R", mount_root])
