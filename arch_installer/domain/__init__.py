"""Domain models for an installation run."""

from __future__ import annotations

from .models import (
    Disk,
    InstallationPlan,
    PartitionLayout,
    PartitionRole,
    PartitionSpec,
)


__all__ = [
    "Disk",
    "InstallationPlan",
    "PartitionLayout",
    "PartitionRole",
    "PartitionSpec",
]
