from __future__ import annotations

import os
import sys
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from loguru import Logger

from loguru import logger

DEFAULT_LOG_DIR = Path(
    os.environ.get("ARCH_INSTALLER_LOG_DIR", "/var/log/arch-installer")
)

# Keys bound on a record that must never reach a sink verbatim.
SECRET_EXTRA_KEYS = ("password", "root_password", "user_password", "input_text")


def _should_log_command_output(record) -> bool:
    """Keep raw tool output (pacstrap, makepkg, ...) out of the console."""
    tags = record["extra"].get("tags", [])

    # Always log warnings and errors
    if record["level"].no >= logger.level("WARNING").no:
        return True

    if "output" in tags:
        return record["level"].no <= logger.level("TRACE").no

    return True


def _redact_secrets(record) -> bool:
    """Strip password material from bound extras before it is written."""
    extra = record["extra"]
    for key in SECRET_EXTRA_KEYS:
        if key in extra:
            extra[key] = "***"
    return True


def _combined_filter(record) -> bool:
    """Combined filter for all console suppression rules."""
    return _redact_secrets(record) and _should_log_command_output(record)


def setup_logging(
    *,
    debug: bool = False,
    trace: bool = False,
    log_dir: Path | None = None,
) -> Logger:
    """
    Setup logging with a console sink plus persistent file sinks.

    Logging Tiers:
    - CRITICAL/ERROR: Failed phases, aborted installs
    - SUCCESS/INFO: Phase start/completion, operator decisions
    - DEBUG: Every external command with its exit status and output
    - TRACE: Raw streamed tool output (pacstrap, makepkg, yay)

    Log Files:
    - install.log: INFO+ events
    - debug.log: DEBUG+ events when --debug is enabled
    - structured.jsonl: Structured JSON logs (INFO+)

    The live ISO runs from RAM, so the directory is usually lost on reboot;
    pass ``log_dir`` pointing into the mounted target to keep a copy.

    Args:
        debug: Enable DEBUG level logging
        trace: Enable TRACE level logging (very verbose)
        log_dir: Custom log directory (defaults to /var/log/arch-installer)
    """
    logger.remove()
    logger.configure(extra={"job_id": "-", "tags": [], "source": "APP"})

    if trace:
        console_level = "TRACE"
    elif debug:
        console_level = "DEBUG"
    else:
        console_level = "INFO"

    # SINK 1: Console (stderr)
    logger.add(
        sys.stderr,
        level=console_level,
        backtrace=False,
        diagnose=False,
        filter=_combined_filter,
        colorize=True,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[source]: <10}</cyan> | "
            "{message}"
        ),
    )

    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    # SINK 2: Install Log (INFO+)
    logger.add(
        log_dir / "install.log",
        level="INFO",
        rotation="5 MB",
        retention=5,
        backtrace=False,
        diagnose=False,
        filter=_redact_secrets,
        format=(
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{extra[source]: <10} | "
            "{extra[job_id]: <20} | "
            "{message}"
        ),
    )

    # SINK 3: Debug Log (DEBUG+ when debug=True)
    if debug or trace:
        logger.add(
            log_dir / "debug.log",
            level="TRACE" if trace else "DEBUG",
            rotation="20 MB",
            retention=3,
            backtrace=True,
            diagnose=False,
            filter=_redact_secrets,
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{extra[source]: <10} | "
                "{extra[job_id]: <20} | "
                "{extra[tags]} | "
                "{message}"
            ),
        )

    # SINK 4: Structured JSON Log (INFO+)
    logger.add(
        log_dir / "structured.jsonl",
        level="INFO",
        rotation="10 MB",
        retention=5,
        serialize=True,
        filter=_redact_secrets,
        format="{message}",
    )

    return logger


def get_logger(
    *,
    job_id: str | None = None,
    tags: Iterable[str] | None = None,
    source: str | None = None,
) -> Logger:
    """
    Get a logger with bound context.

    Args:
        job_id: Job identifier for tracking a phase
        tags: Tags for filtering (e.g., ["disk", "parted"])
        source: Source component (e.g., "disk", "target")

    Returns:
        Logger with bound context
    """
    extras: dict[str, object] = {}
    if job_id is not None:
        extras["job_id"] = job_id
    if tags is not None:
        extras["tags"] = list(tags)
    if source is not None:
        extras["source"] = source
    return logger.bind(**extras)


@contextmanager
def operation_context(operation: str, **details):
    """
    Context manager for tracking an installation phase with automatic timing.

    Logs phase start, completion, and failure with duration tracking.

    Args:
        operation: Phase name (e.g., "partition", "pacstrap", "configure")
        **details: Phase-specific details to log

    Yields:
        Logger bound with job_id and operation context

    Example:
        with operation_context("partition", disk="/dev/sda") as log:
            log.debug("Wiping signatures")
    """
    job_id = f"{operation}-{uuid.uuid4().hex[:8]}"

    with logger.contextualize(job_id=job_id, operation=operation, **details):
        start_time = time.time()
        log = logger.bind(source=operation, job_id=job_id, tags=[operation])

        log.info(f"{operation.capitalize()} started")

        try:
            yield log
            duration = time.time() - start_time
            log.success(
                f"{operation.capitalize()} completed",
                duration_seconds=round(duration, 2),
            )
        except Exception as e:
            duration = time.time() - start_time
            log.error(
                f"{operation.capitalize()} failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_seconds=round(duration, 2),
            )
            raise


class LoggerFactory:
    """
    Factory for creating domain-specific loggers with automatic context.
    """

    @staticmethod
    def for_disk(disk: str | None = None) -> Logger:
        """Logger for partitioning, formatting and mounting."""
        extras: dict[str, object] = {"source": "disk", "tags": ["disk", "storage"]}
        if disk is not None:
            extras["disk"] = disk
        return logger.bind(**extras)

    @staticmethod
    def for_packages() -> Logger:
        """Logger for pacman, pacstrap and AUR builds."""
        return logger.bind(source="packages", tags=["packages"])

    @staticmethod
    def for_target(root: str | None = None) -> Logger:
        """Logger for commands run inside the installed system."""
        return logger.bind(source="target", tags=["target", "chroot"], root=root or "-")

    @staticmethod
    def for_command() -> Logger:
        """Logger for raw external command execution."""
        return logger.bind(source="command", tags=["command"])

    @staticmethod
    def for_system() -> Logger:
        """Logger for startup, preflight and shutdown."""
        return logger.bind(source="system", tags=["system"])
