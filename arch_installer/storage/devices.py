"""Candidate disk discovery using lsblk.

Only whole disks whose node matches /dev/sd*, /dev/nvme* or /dev/vd* are
offered. Nothing here checks whether the disk holds the running live
system; the operator picks the disk and confirms destruction.

Operations:
    - list_disks(): Candidate disks with size and model
    - get_disk_size(): Size of one disk in bytes
    - validate_disk_path(): Reject paths that are not block devices
    - human_size(): Bytes to a short human-readable string
"""

from __future__ import annotations

import json
import os
import re
import stat

from arch_installer.domain.models import Disk
from arch_installer.exceptions import CommandFailedError, InvalidDiskError
from arch_installer.logging import LoggerFactory
from arch_installer.system.commands import run_checked_command

CANDIDATE_DISK_RE = re.compile(r"^/dev/(sd|nvme|vd)")

log = LoggerFactory.for_disk()


def human_size(size_bytes) -> str:
    size = float(size_bytes or 0)
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if size < 1024 or unit == "TiB":
            if unit == "B":
                return f"{int(size)}{unit}"
            return f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}TiB"


def list_disks() -> list[Disk]:
    """Return candidate target disks reported by lsblk."""
    output = run_checked_command(
        ["lsblk", "-J", "-b", "-d", "-p", "-o", "NAME,PATH,SIZE,MODEL,TYPE"]
    )
    try:
        data = json.loads(output or "{}")
    except json.JSONDecodeError as error:
        log.warning(f"Could not parse lsblk output: {error}")
        return []
    disks = []
    for device in data.get("blockdevices", []):
        if device.get("type") != "disk":
            continue
        path = device.get("path") or device.get("name", "")
        if not CANDIDATE_DISK_RE.match(path):
            continue
        try:
            disks.append(Disk.from_lsblk_dict(device))
        except (KeyError, ValueError) as error:
            log.debug(f"Skipping unparsable lsblk entry {device!r}: {error}")
    return disks


def get_disk_size(disk: str) -> int:
    """Size of ``disk`` in bytes.

    Raises:
        InvalidDiskError: If lsblk cannot report a size
    """
    try:
        output = run_checked_command(["lsblk", "-b", "-d", "-n", "-o", "SIZE", disk])
    except CommandFailedError as error:
        raise InvalidDiskError(disk, f"cannot read size ({error.message})") from error
    try:
        return int(output.strip().splitlines()[0])
    except (IndexError, ValueError) as error:
        raise InvalidDiskError(disk, "cannot read size") from error


def validate_disk_path(disk: str) -> None:
    """Raise InvalidDiskError unless ``disk`` is an existing block device."""
    if not disk.startswith("/dev/"):
        raise InvalidDiskError(disk, "path must start with /dev/")
    try:
        mode = os.stat(disk).st_mode
    except OSError:
        raise InvalidDiskError(disk, "device does not exist") from None
    if not stat.S_ISBLK(mode):
        raise InvalidDiskError(disk, "not a block device")
