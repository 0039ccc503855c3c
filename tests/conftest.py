"""
Pytest configuration and shared fixtures for arch-installer tests.

No test runs a real external command: every runner is patched at the
module that uses it.
"""

import json
from dataclasses import replace
from typing import Any, Dict
from unittest.mock import Mock

import pytest

from arch_installer.domain.models import InstallationPlan, PartitionLayout
from arch_installer.install.chroot import TargetRoot


# ==============================================================================
# Plan / Layout Fixtures
# ==============================================================================


@pytest.fixture
def plan() -> InstallationPlan:
    """A typical confirmed plan without the desktop extras."""
    return InstallationPlan(
        disk="/dev/sda",
        timezone="Europe/Berlin",
        locale="en_US",
        keymap="de-latin1",
        hostname="archlinux",
        username="alice",
        root_password="rootpw",
        user_password="userpw",
        extended=False,
    )


@pytest.fixture
def extended_plan(plan) -> InstallationPlan:
    return replace(plan, extended=True)


@pytest.fixture
def sda_layout() -> PartitionLayout:
    return PartitionLayout(
        disk="/dev/sda",
        efi="/dev/sda1",
        root="/dev/sda2",
        swap="/dev/sda3",
        home="/dev/sda4",
    )


# ==============================================================================
# Target Fixtures
# ==============================================================================


@pytest.fixture
def target_root(tmp_path) -> TargetRoot:
    """TargetRoot over an empty temporary tree with a stock sudoers file."""
    (tmp_path / "etc").mkdir()
    (tmp_path / "etc" / "sudoers").write_text(
        "root ALL=(ALL:ALL) ALL\n"
        "## Uncomment to allow members of group wheel to execute any command\n"
        "# %wheel ALL=(ALL:ALL) ALL\n"
        "## Same thing without a password\n"
        "# %wheel ALL=(ALL:ALL) NOPASSWD: ALL\n",
        encoding="utf-8",
    )
    return TargetRoot(str(tmp_path))


@pytest.fixture
def chroot_runner(mocker):
    """Patch the runners TargetRoot uses; blkid answers with a fixed UUID."""

    def fake_run(command, input_text=None):
        if "blkid" in command:
            return "1111-2222-3333\n"
        return ""

    checked = mocker.patch(
        "arch_installer.install.chroot.run_checked_command", side_effect=fake_run
    )
    streaming = mocker.patch(
        "arch_installer.install.chroot.run_streaming_command", return_value=0
    )
    return {"checked": checked, "streaming": streaming}


def inner_commands(mock_runner) -> list:
    """Commands run inside the target, without the arch-chroot prefix."""
    return [call.args[0][2:] for call in mock_runner.call_args_list]


@pytest.fixture
def inner():
    return inner_commands


# ==============================================================================
# lsblk Fixtures
# ==============================================================================


@pytest.fixture
def mock_lsblk_output() -> str:
    """lsblk -J -b -d -p output with disks, a loop device and a cdrom."""
    output: Dict[str, Any] = {
        "blockdevices": [
            {
                "name": "/dev/loop0",
                "path": "/dev/loop0",
                "size": 838860800,
                "model": None,
                "type": "loop",
            },
            {
                "name": "/dev/sda",
                "path": "/dev/sda",
                "size": 500107862016,
                "model": "Samsung SSD 860 ",
                "type": "disk",
            },
            {
                "name": "/dev/sr0",
                "path": "/dev/sr0",
                "size": 1073741312,
                "model": "QEMU DVD-ROM",
                "type": "rom",
            },
            {
                "name": "/dev/nvme0n1",
                "path": "/dev/nvme0n1",
                "size": 1000204886016,
                "model": "WD_BLACK SN850X",
                "type": "disk",
            },
            {
                "name": "/dev/mmcblk0",
                "path": "/dev/mmcblk0",
                "size": 31914983424,
                "model": None,
                "type": "disk",
            },
        ]
    }
    return json.dumps(output)


@pytest.fixture
def completed():
    """Factory for subprocess.CompletedProcess-like mocks."""

    def _make(returncode=0, stdout="", stderr=""):
        return Mock(returncode=returncode, stdout=stdout, stderr=stderr)

    return _make
