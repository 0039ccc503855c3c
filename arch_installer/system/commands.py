"""External command execution.

Every tool the installer drives (parted, mkfs, pacstrap, arch-chroot, ...)
goes through here so that a non-zero exit status is turned into a
CommandFailedError and the pipeline stops.
"""

from __future__ import annotations

import subprocess
from typing import Optional, Sequence

from arch_installer.exceptions import CommandFailedError
from arch_installer.logging import LoggerFactory


log = LoggerFactory.for_command()
output_log = log.bind(tags=["command", "output"])


def _format_command(command: Sequence[str]) -> str:
    return " ".join(command)


def run_command(
    command: Sequence[str],
    check: bool = True,
    input_text: Optional[str] = None,
    log_command: bool = True,
) -> subprocess.CompletedProcess:
    """Run a command with captured text output.

    ``input_text`` is fed to stdin and never logged (chpasswd reads
    passwords this way).

    Raises:
        CommandFailedError: If the executable is missing, or if ``check``
            is set and the command exits non-zero
    """
    if log_command:
        log.debug(f"Running command: {_format_command(command)}")
    try:
        result = subprocess.run(
            list(command),
            input=input_text,
            text=True,
            capture_output=True,
        )
    except OSError as error:
        log.debug(f"Command could not be started: {_format_command(command)}: {error}")
        raise CommandFailedError(command, 127, str(error)) from error
    if result.stdout:
        log.debug(f"stdout: {result.stdout.strip()}")
    if result.stderr:
        log.debug(f"stderr: {result.stderr.strip()}")
    if log_command:
        log.debug(f"Command completed with return code {result.returncode}")
    if check and result.returncode != 0:
        stderr = (result.stderr or "").strip()
        stdout = (result.stdout or "").strip()
        raise CommandFailedError(
            command, result.returncode, stderr or stdout or "Command failed"
        )
    return result


def run_checked_command(
    command: Sequence[str], input_text: Optional[str] = None
) -> str:
    """Run a command and raise CommandFailedError if it fails."""
    return run_command(command, check=True, input_text=input_text).stdout


def run_streaming_command(command: Sequence[str]) -> int:
    """Run a long command (pacstrap, makepkg), streaming its output to the log.

    The output is not captured in memory; the last lines are kept for the
    error message.

    Raises:
        CommandFailedError: If the command cannot start or exits non-zero
    """
    log.debug(f"Starting command: {_format_command(command)}")
    try:
        process = subprocess.Popen(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as error:
        raise CommandFailedError(command, 127, str(error)) from error

    tail: list[str] = []
    assert process.stdout is not None
    for line in process.stdout:
        line = line.rstrip()
        if not line:
            continue
        output_log.trace(line)
        tail.append(line)
        del tail[:-5]
    returncode = process.wait()
    if returncode != 0:
        message = tail[-1] if tail else "Command failed"
        log.debug(f"Command failed with code {returncode}: {message}")
        raise CommandFailedError(command, returncode, message)
    log.debug("Command completed successfully")
    return returncode


def run_quietly(command: Sequence[str]) -> bool:
    """Best-effort run; returns whether the command succeeded."""
    try:
        result = run_command(command, check=False)
    except CommandFailedError:
        return False
    return result.returncode == 0


__all__ = [
    "run_command",
    "run_checked_command",
    "run_streaming_command",
    "run_quietly",
]
