"""Custom exceptions for the installer pipeline.

Every phase signals failure by raising one of these; the orchestrator stops
at the first one and never runs a later phase.

Exception Hierarchy:
    InstallerError (base)
        ├── PreflightError
        │   ├── NotRootError
        │   └── NetworkUnavailableError
        ├── AbortedByUserError
        ├── SettingsError
        ├── CommandError
        │   └── CommandFailedError
        ├── DiskError
        │   ├── InvalidDiskError
        │   └── DiskTooSmallError
        └── TemplateError
            ├── TemplateVariableError
            └── TemplateValueError

Usage:
    from arch_installer.exceptions import DiskTooSmallError

    if size_bytes < required_bytes:
        raise DiskTooSmallError(disk, size_bytes, required_bytes)
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence


class InstallerError(Exception):
    """Base exception for all installer failures."""


class PreflightError(InstallerError):
    """Base exception for environment checks run before anything else."""


class NotRootError(PreflightError):
    """The installer was started without root privileges."""

    def __init__(self, euid: int):
        self.euid = euid
        super().__init__(f"This installer must be run as root (effective uid {euid})")


class NetworkUnavailableError(PreflightError):
    """The reachability probe failed."""

    def __init__(self, host: str):
        self.host = host
        super().__init__(
            f"No internet connection (could not reach {host}). "
            "Please check your network settings."
        )


class AbortedByUserError(InstallerError):
    """The operator declined a confirmation prompt."""

    def __init__(self, message: str = "Aborted by user"):
        super().__init__(message)


class SettingsError(InstallerError):
    """A settings file given explicitly cannot be used."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load settings from {path}: {reason}")


class CommandError(InstallerError):
    """Base exception for external command failures."""


class CommandFailedError(CommandError):
    """An external command exited non-zero or could not be started."""

    def __init__(self, command: Sequence[str], returncode: int, message: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.message = message
        text = f"Command failed ({' '.join(self.command)}) with exit code {returncode}"
        if message:
            text += f": {message}"
        super().__init__(text)


class DiskError(InstallerError):
    """Base exception for target disk problems."""


class InvalidDiskError(DiskError):
    """The chosen path is not a usable block device."""

    def __init__(self, disk: str, reason: str):
        self.disk = disk
        self.reason = reason
        super().__init__(f"Invalid target disk {disk or '(empty)'}: {reason}")


class DiskTooSmallError(DiskError):
    """The disk cannot hold the fixed partition layout."""

    def __init__(self, disk: str, size_bytes: int, required_bytes: int):
        self.disk = disk
        self.size_bytes = size_bytes
        self.required_bytes = required_bytes
        super().__init__(
            f"Disk {disk} ({size_bytes} bytes) is too small for the partition "
            f"layout (needs at least {required_bytes} bytes)"
        )


class TemplateError(InstallerError):
    """Base exception for configuration template rendering."""


class TemplateVariableError(TemplateError):
    """Supplied values do not match the template's declared variables."""

    def __init__(
        self,
        template: str,
        missing: Iterable[str] = (),
        unexpected: Iterable[str] = (),
    ):
        self.template = template
        self.missing = sorted(missing)
        self.unexpected = sorted(unexpected)
        parts = []
        if self.missing:
            parts.append(f"missing {', '.join(self.missing)}")
        if self.unexpected:
            parts.append(f"unexpected {', '.join(self.unexpected)}")
        super().__init__(f"Template {template}: {'; '.join(parts)}")


class TemplateValueError(TemplateError):
    """A value cannot be placed safely into the destination format."""

    def __init__(self, template: str, name: str, reason: str):
        self.template = template
        self.name = name
        self.reason = reason
        super().__init__(f"Template {template}: value for {name} {reason}")
