"""Host system helpers: external command execution."""

from .commands import (
    run_checked_command,
    run_command,
    run_quietly,
    run_streaming_command,
)

__all__ = [
    "run_command",
    "run_checked_command",
    "run_streaming_command",
    "run_quietly",
]
