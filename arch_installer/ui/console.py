"""Operator-facing terminal output.

Status lines carry a colored prefix ([INFO], [SUCCESS], [WARNING], [ERROR])
so a failing phase is obvious on the live ISO console. Log records go to
loguru separately; these helpers are only for the person at the keyboard.
"""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from arch_installer.domain.models import Disk
from arch_installer.storage.devices import human_size

theme = Theme(
    {
        "info": "blue",
        "success": "green",
        "warning": "yellow",
        "error": "red",
        "banner": "bold cyan",
    }
)

console = Console(theme=theme, highlight=False)


def print_status(message: str) -> None:
    console.print(f"[info]\\[INFO][/info] {escape(message)}")


def print_success(message: str) -> None:
    console.print(f"[success]\\[SUCCESS][/success] {escape(message)}")


def print_warning(message: str) -> None:
    console.print(f"[warning]\\[WARNING][/warning] {escape(message)}")


def print_error(message: str) -> None:
    console.print(f"[error]\\[ERROR][/error] {escape(message)}")


def print_lines(lines: Iterable[str]) -> None:
    for line in lines:
        console.print(escape(line))


def print_blank() -> None:
    console.print()


def print_banner() -> None:
    console.clear()
    console.print("=========================================", style="banner")
    console.print("    Arch Linux Installation Script", style="banner")
    console.print("         with Hyprland Setup", style="banner")
    console.print("=========================================", style="banner")
    console.print()


def print_disks(disks: Iterable[Disk]) -> None:
    print_status("Available disks:")
    found = False
    for disk in disks:
        found = True
        model = f" {disk.model}" if disk.model else ""
        console.print(f"  {escape(disk.path)}  {human_size(disk.size_bytes)}{escape(model)}")
    if not found:
        print_warning("No candidate disks found (looked for /dev/sd*, /dev/nvme*, /dev/vd*)")
