"""Run commands and write files inside the installed system.

TargetRoot wraps ``arch-chroot <root>`` so every in-target step is an argv
list run through the checked command runner, never a generated script.
Files are written from the host side directly into the mounted tree;
ownership changes go through ``chown`` inside the target so user names
resolve against the target's /etc/passwd.
"""

from __future__ import annotations

import shutil
from pathlib import Path, PurePosixPath
from typing import Optional, Sequence

from arch_installer.logging import LoggerFactory
from arch_installer.system.commands import (
    run_checked_command,
    run_streaming_command,
)


class TargetRoot:
    """An installed-but-not-booted system mounted at ``root``."""

    def __init__(self, root: str):
        self.root = Path(root)
        self.log = LoggerFactory.for_target(str(self.root))

    def __repr__(self) -> str:
        return f"TargetRoot({str(self.root)!r})"

    def path(self, target_path: str) -> Path:
        """Host path of an absolute path inside the target."""
        relative = PurePosixPath(target_path)
        if relative.is_absolute():
            relative = relative.relative_to("/")
        return self.root / relative

    def _wrap(self, command: Sequence[str], user: Optional[str]) -> list[str]:
        inner = list(command)
        if user is not None:
            inner = ["sudo", "-H", "-u", user, "--", *inner]
        return ["arch-chroot", str(self.root), *inner]

    def run(
        self,
        command: Sequence[str],
        input_text: Optional[str] = None,
        user: Optional[str] = None,
        stream: bool = False,
    ) -> str:
        """Run ``command`` inside the target, as ``user`` when given.

        ``stream`` sends the output to the trace log as it arrives; use it for
        package installs and builds. Returns captured stdout otherwise.
        """
        wrapped = self._wrap(command, user)
        if stream:
            run_streaming_command(wrapped)
            return ""
        return run_checked_command(wrapped, input_text=input_text)

    def output(self, command: Sequence[str]) -> str:
        return self.run(command).strip()

    def write_file(
        self,
        target_path: str,
        content: str,
        owner: Optional[str] = None,
        mode: Optional[int] = None,
        append: bool = False,
    ) -> Path:
        host_path = self.path(target_path)
        host_path.parent.mkdir(parents=True, exist_ok=True)
        with open(host_path, "a" if append else "w", encoding="utf-8") as handle:
            handle.write(content)
        if mode is not None:
            host_path.chmod(mode)
        if owner is not None:
            self.chown(target_path, owner)
        self.log.debug(f"Wrote {target_path}")
        return host_path

    def read_file(self, target_path: str) -> str:
        return self.path(target_path).read_text(encoding="utf-8")

    def remove_file(self, target_path: str) -> None:
        self.path(target_path).unlink(missing_ok=True)

    def remove_tree(self, target_path: str) -> None:
        host_path = self.path(target_path)
        if host_path.exists():
            shutil.rmtree(host_path)

    def make_dirs(self, target_path: str, owner: Optional[str] = None) -> None:
        self.path(target_path).mkdir(parents=True, exist_ok=True)
        if owner is not None:
            self.chown(target_path, owner, recursive=True)

    def chown(self, target_path: str, owner: str, recursive: bool = False) -> None:
        command = ["chown"]
        if recursive:
            command.append("-R")
        command.extend([f"{owner}:{owner}", target_path])
        self.run(command)

    def enable_service(self, name: str, user_scope: bool = False) -> None:
        command = ["systemctl", "enable"]
        if user_scope:
            command.append("--global")
        command.append(name)
        self.run(command)
