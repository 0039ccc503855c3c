"""Interactive prompts for the installation plan.

No format validation is applied to answers; whatever the operator types is
used verbatim. Only the exact token "yes" counts as agreement.
"""

from __future__ import annotations

from typing import Optional

from arch_installer.config.settings import get_setting
from arch_installer.domain.models import InstallationPlan
from arch_installer.exceptions import AbortedByUserError
from arch_installer.ui.console import console, print_error

AFFIRMATIVE = "yes"


def prompt_input(prompt: str, default: Optional[str] = None) -> str:
    """Ask for a value; empty input falls back to ``default``."""
    if default:
        answer = console.input(f"{prompt} [{default}]: ", markup=False)
        return answer or default
    return console.input(f"{prompt}: ", markup=False)


def prompt_password(prompt: str) -> str:
    """Masked entry twice, repeated until both entries match."""
    while True:
        password = console.input(f"{prompt}: ", password=True, markup=False)
        password_confirm = console.input("Confirm password: ", password=True, markup=False)
        if password == password_confirm:
            return password
        print_error("Passwords do not match. Please try again.")


def confirm(prompt: str) -> bool:
    return console.input(f"{prompt} (yes/no): ", markup=False) == AFFIRMATIVE


def require_confirmation(prompt: str, message: str = "Aborted by user") -> None:
    """Raise AbortedByUserError unless the operator answers "yes"."""
    if not confirm(prompt):
        raise AbortedByUserError(message)


def collect_plan() -> InstallationPlan:
    """Prompt for every plan field, defaults taken from settings."""
    disk = prompt_input("Enter the disk to install to (e.g., /dev/sda, /dev/nvme0n1)")
    timezone = prompt_input("Enter timezone", get_setting("timezone"))
    locale = prompt_input("Enter locale", get_setting("locale"))
    keymap = prompt_input("Enter keyboard layout", get_setting("keymap"))
    hostname = prompt_input("Enter hostname", get_setting("hostname"))
    username = prompt_input("Enter username", get_setting("username"))
    root_password = prompt_password("Enter root password")
    user_password = prompt_password("Enter user password")
    console.print()
    extended = confirm(
        "Do you want to install the extended system (Hyprland, AUR packages, etc.)?"
    )
    return InstallationPlan(
        disk=disk,
        timezone=timezone,
        locale=locale,
        keymap=keymap,
        hostname=hostname,
        username=username,
        root_password=root_password,
        user_password=user_password,
        extended=extended,
    )
