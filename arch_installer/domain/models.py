"""Domain model for an installation run.

The plan collected from the operator and the partition layout derived from
the chosen disk are threaded explicitly through every phase instead of
living in module globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


# ==============================================================================
# Disk Domain
# ==============================================================================


@dataclass(frozen=True)
class Disk:
    """A whole disk offered as an installation target."""

    path: str  # e.g., "/dev/nvme0n1"
    size_bytes: int
    model: str | None = None

    @property
    def size_gib(self) -> float:
        return self.size_bytes / (1024**3)

    def format_label(self) -> str:
        """e.g., "/dev/sda 476.9GiB Samsung SSD 860"."""
        label = f"{self.path} {self.size_gib:.1f}GiB"
        if self.model:
            label += f" {self.model.strip()}"
        return label

    @classmethod
    def from_lsblk_dict(cls, device: dict[str, Any]) -> Disk:
        """Convert an lsblk JSON entry (``-b`` sizes) to a Disk.

        Raises:
            KeyError: If the path/name is missing
            ValueError: If size cannot be converted to int
        """
        path = device.get("path") or f"/dev/{device['name']}"
        model = device.get("model")
        if model:
            model = model.strip() or None
        return cls(path=path, size_bytes=int(device.get("size") or 0), model=model)


# ==============================================================================
# Partition Domain
# ==============================================================================


class PartitionRole(Enum):
    EFI = "efi"
    ROOT = "root"
    SWAP = "swap"
    HOME = "home"


@dataclass(frozen=True)
class PartitionSpec:
    """One row of the fixed partition table."""

    role: PartitionRole
    number: int
    parted_fs: str  # filesystem hint passed to parted mkpart
    start: str
    end: str
    fstype: str  # filesystem created by mkfs/mkswap
    label: str


@dataclass(frozen=True)
class PartitionLayout:
    """Device paths for the four partitions of a prepared disk."""

    disk: str
    efi: str
    root: str
    swap: str
    home: str

    def path_for(self, role: PartitionRole) -> str:
        return getattr(self, role.value)

    def as_dict(self) -> dict[PartitionRole, str]:
        return {role: self.path_for(role) for role in PartitionRole}


# ==============================================================================
# Installation Plan
# ==============================================================================


@dataclass(frozen=True)
class InstallationPlan:
    """Everything the operator chose. Immutable once confirmed."""

    disk: str
    timezone: str
    locale: str
    keymap: str
    hostname: str
    username: str
    root_password: str
    user_password: str
    extended: bool = False

    def summary_lines(self) -> list[str]:
        """Human-readable settings, passwords omitted."""
        return [
            f"Disk: {self.disk}",
            f"Timezone: {self.timezone}",
            f"Locale: {self.locale}",
            f"Keymap: {self.keymap}",
            f"Hostname: {self.hostname}",
            f"Username: {self.username}",
            f"Extended setup: {'yes' if self.extended else 'no'}",
        ]

    def __repr__(self) -> str:
        # Keep passwords out of tracebacks and log records
        return (
            f"InstallationPlan(disk={self.disk!r}, timezone={self.timezone!r}, "
            f"locale={self.locale!r}, keymap={self.keymap!r}, "
            f"hostname={self.hostname!r}, username={self.username!r}, "
            f"extended={self.extended!r})"
        )
