"""Base system installation into the mounted target."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from arch_installer.logging import LoggerFactory
from arch_installer.system.commands import run_checked_command, run_streaming_command


log = LoggerFactory.for_packages()


def refresh_keyring() -> None:
    """Update the live system's keyring so pacstrap can verify packages."""
    run_streaming_command(["pacman", "-Sy", "--noconfirm", "archlinux-keyring"])


def install_base_system(mount_root: str, packages: Sequence[str]) -> None:
    log.info(f"Installing {len(packages)} base packages into {mount_root}")
    run_streaming_command(["pacstrap", mount_root, *packages])
    log.success("Base system installed")


def generate_fstab(mount_root: str) -> Path:
    """Append UUID-based entries for everything mounted under ``mount_root``."""
    entries = run_checked_command(["genfstab", "-U", mount_root])
    fstab = Path(mount_root) / "etc" / "fstab"
    fstab.parent.mkdir(parents=True, exist_ok=True)
    with open(fstab, "a", encoding="utf-8") as handle:
        handle.write(entries)
    log.success("fstab generated")
    return fstab
