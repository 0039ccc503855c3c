"""Ordered installation steps with fail-fast execution.

Each Step receives the same InstallContext. The first step that raises
stops the run; no later step is started and nothing is rolled back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence

from arch_installer.config.settings import get_float, get_list, get_setting
from arch_installer.domain.models import InstallationPlan, PartitionLayout
from arch_installer.exceptions import InstallerError
from arch_installer.install import base, desktop, system_config
from arch_installer.install.chroot import TargetRoot
from arch_installer.logging import operation_context
from arch_installer.storage import format as storage_format
from arch_installer.storage import mount, partition
from arch_installer.ui.console import print_error, print_status, print_success


@dataclass
class InstallContext:
    """State threaded through the install steps."""

    plan: InstallationPlan
    mount_root: str = "/mnt"
    settle_delay: float = 2.0
    base_packages: Sequence[str] = field(default_factory=list)
    desktop_packages: Sequence[str] = field(default_factory=list)
    aur_packages: Sequence[str] = field(default_factory=list)
    user_groups: Sequence[str] = system_config.DEFAULT_USER_GROUPS
    user_shell: str = system_config.DEFAULT_USER_SHELL
    layout: Optional[PartitionLayout] = None

    @classmethod
    def from_settings(cls, plan: InstallationPlan, mount_root: Optional[str] = None) -> InstallContext:
        return cls(
            plan=plan,
            mount_root=mount_root or get_setting("mount_root", "/mnt"),
            settle_delay=get_float("settle_delay", 2.0),
            base_packages=get_list("base_packages"),
            desktop_packages=get_list("desktop_packages"),
            aur_packages=get_list("aur_packages"),
            user_groups=get_list("user_groups") or system_config.DEFAULT_USER_GROUPS,
            user_shell=get_setting("user_shell", system_config.DEFAULT_USER_SHELL),
        )

    def require_layout(self) -> PartitionLayout:
        if self.layout is None:
            raise InstallerError("Disk has not been partitioned yet")
        return self.layout

    @property
    def target(self) -> TargetRoot:
        return TargetRoot(self.mount_root)


@dataclass(frozen=True)
class Step:
    name: str
    description: str
    action: Callable[[InstallContext], None]


def run_pipeline(steps: Iterable[Step], context: InstallContext) -> None:
    """Run ``steps`` in order, stopping at the first InstallerError or OSError.

    The failing step is reported with a red [ERROR] line naming it and the
    exception propagates to the caller.
    """
    for step in steps:
        print_status(f"{step.description}...")
        try:
            with operation_context(step.name):
                step.action(context)
        except (InstallerError, OSError) as error:
            print_error(f"{step.description} failed: {error}")
            error.reported = True
            raise
        print_success(f"{step.description} completed")


def _partition(context: InstallContext) -> None:
    context.layout = partition.prepare_disk(
        context.plan.disk, context.mount_root, context.settle_delay
    )


def _format(context: InstallContext) -> None:
    storage_format.format_partitions(context.require_layout())


def _mount(context: InstallContext) -> None:
    mount.mount_partitions(context.require_layout(), context.mount_root)


def _install_base(context: InstallContext) -> None:
    base.refresh_keyring()
    base.install_base_system(context.mount_root, context.base_packages)


def _fstab(context: InstallContext) -> None:
    base.generate_fstab(context.mount_root)


def _configure(context: InstallContext) -> None:
    system_config.configure_system(
        context.plan,
        context.require_layout(),
        context.target,
        groups=context.user_groups,
        shell=context.user_shell,
    )


def _extended(context: InstallContext) -> None:
    desktop.setup_extended_system(
        context.target,
        context.plan.username,
        context.desktop_packages,
        context.aur_packages,
    )


def build_install_steps(extended: bool) -> list[Step]:
    steps = [
        Step("partition", "Partitioning disk", _partition),
        Step("format", "Formatting partitions", _format),
        Step("mount", "Mounting partitions", _mount),
        Step("pacstrap", "Installing base system", _install_base),
        Step("fstab", "Generating fstab", _fstab),
        Step("configure", "Configuring system", _configure),
    ]
    if extended:
        steps.append(Step("desktop", "Setting up extended system with Hyprland", _extended))
    return steps
