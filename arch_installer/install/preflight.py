"""Environment checks run before any prompt."""

from __future__ import annotations

import os

from arch_installer.exceptions import CommandFailedError, NetworkUnavailableError, NotRootError
from arch_installer.logging import LoggerFactory
from arch_installer.system.commands import run_checked_command
from arch_installer.ui.console import print_status, print_success


log = LoggerFactory.for_system()


def check_root() -> None:
    euid = os.geteuid()
    if euid != 0:
        raise NotRootError(euid)


def check_internet(host: str) -> None:
    """Single ping to ``host``; no retry."""
    print_status("Checking internet connection...")
    try:
        run_checked_command(["ping", "-c", "1", host])
    except CommandFailedError as error:
        raise NetworkUnavailableError(host) from error
    print_success("Internet connection is working")
    log.debug(f"Reached {host}")


def update_clock() -> None:
    print_status("Updating system clock...")
    run_checked_command(["timedatectl", "set-ntp", "true"])
    print_success("System clock updated")
    log.debug("NTP enabled")


def run_preflight(ping_host: str) -> None:
    check_root()
    check_internet(ping_host)
    update_clock()
