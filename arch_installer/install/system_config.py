"""Configuration of the freshly pacstrapped system.

Runs in a fixed order inside the target; the first failing command stops the
run and nothing already applied (users, passwords) is undone.

    1. timezone + hardware clock
    2. locale
    3. console keymap
    4. hostname + hosts
    5. root password
    6. user account + password
    7. wheel group in sudoers
    8. NetworkManager
    9. systemd-boot, boot entry and loader.conf
"""

from __future__ import annotations

import re
from typing import Sequence

from arch_installer.domain.models import InstallationPlan, PartitionLayout
from arch_installer.install.chroot import TargetRoot
from arch_installer.logging import LoggerFactory
from arch_installer.templates import render_template

DEFAULT_USER_GROUPS = ("wheel", "audio", "video", "optical", "storage")
DEFAULT_USER_SHELL = "/bin/zsh"

SUDOERS_PATH = "/etc/sudoers"
WHEEL_RULE_RE = re.compile(r"^# %wheel ALL=\(ALL:ALL\) ALL", re.MULTILINE)
WHEEL_RULE = "%wheel ALL=(ALL:ALL) ALL"

log = LoggerFactory.for_target()


def set_timezone(target: TargetRoot, timezone: str) -> None:
    target.run(["ln", "-sf", f"/usr/share/zoneinfo/{timezone}", "/etc/localtime"])
    target.run(["hwclock", "--systohc"])


def set_locale(target: TargetRoot, locale: str) -> None:
    target.write_file("/etc/locale.gen", render_template("locale.gen", locale=locale), append=True)
    target.run(["locale-gen"])
    target.write_file("/etc/locale.conf", render_template("locale.conf", locale=locale))


def set_keymap(target: TargetRoot, keymap: str) -> None:
    target.write_file("/etc/vconsole.conf", render_template("vconsole.conf", keymap=keymap))


def set_hostname(target: TargetRoot, hostname: str) -> None:
    target.write_file("/etc/hostname", render_template("hostname", hostname=hostname))
    target.write_file("/etc/hosts", render_template("hosts", hostname=hostname))


def set_password(target: TargetRoot, account: str, password: str) -> None:
    """Set a password via chpasswd's stdin so it never appears in argv."""
    target.run(
        ["chpasswd"],
        input_text=render_template("chpasswd", account=account, password=password),
    )


def create_user(
    target: TargetRoot,
    username: str,
    groups: Sequence[str] = DEFAULT_USER_GROUPS,
    shell: str = DEFAULT_USER_SHELL,
) -> None:
    target.run(["useradd", "-m", "-G", ",".join(groups), "-s", shell, username])


def enable_wheel_sudo(target: TargetRoot) -> bool:
    """Uncomment the wheel rule in sudoers. Returns whether a line changed."""
    content = target.read_file(SUDOERS_PATH)
    updated, count = WHEEL_RULE_RE.subn(WHEEL_RULE, content)
    if count:
        target.write_file(SUDOERS_PATH, updated, mode=0o440)
    else:
        log.warning("No commented wheel rule found in sudoers")
    return bool(count)


def install_bootloader(target: TargetRoot, root_partition: str) -> str:
    """Install systemd-boot and write its entry. Returns the root UUID."""
    target.run(["bootctl", "install"])
    root_uuid = target.output(["blkid", "-s", "UUID", "-o", "value", root_partition])
    target.write_file(
        "/boot/loader/entries/arch.conf", render_template("arch.conf", root_uuid=root_uuid)
    )
    target.write_file("/boot/loader/loader.conf", render_template("loader.conf"))
    return root_uuid


def configure_system(
    plan: InstallationPlan,
    layout: PartitionLayout,
    target: TargetRoot,
    groups: Sequence[str] = DEFAULT_USER_GROUPS,
    shell: str = DEFAULT_USER_SHELL,
) -> None:
    set_timezone(target, plan.timezone)
    set_locale(target, plan.locale)
    set_keymap(target, plan.keymap)
    set_hostname(target, plan.hostname)
    set_password(target, "root", plan.root_password)
    create_user(target, plan.username, groups=groups, shell=shell)
    set_password(target, plan.username, plan.user_password)
    enable_wheel_sudo(target)
    target.enable_service("NetworkManager")
    install_bootloader(target, layout.root)
    log.success("System configured")
