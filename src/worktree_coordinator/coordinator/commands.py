"""External command execution.

Commands run to completion with their output buffered in full. There is no
timeout: a command that never exits blocks the dispatch cycle.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Raised when a command exits nonzero or cannot be started.

    `returncode` is None when the process never started.
    """

    def __init__(
        self,
        *,
        command: tuple[str, ...],
        returncode: int | None,
        stderr: str = "",
        cwd: Path | None = None,
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.cwd = cwd
        super().__init__(command, returncode, stderr)

    def __str__(self) -> str:
        cmd = " ".join(self.command)
        if self.returncode is None:
            return f"Command could not be started ({cmd}): {self.stderr}"
        return f"Command failed with code {self.returncode} ({cmd}): {self.stderr}"


class CommandRunner:
    """Run commands in a working directory and return their stdout."""

    def run(self, command: str, args: Sequence[str] = (), cwd: Path | None = None) -> str:
        argv = (command, *args)
        logger.debug("Running command", extra={"argv": list(argv), "cwd": str(cwd)})
        try:
            completed = subprocess.run(
                list(argv),
                cwd=cwd,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as e:
            raise CommandError(command=argv, returncode=None, stderr=str(e), cwd=cwd) from e

        if completed.returncode != 0:
            raise CommandError(
                command=argv,
                returncode=completed.returncode,
                stderr=completed.stderr,
                cwd=cwd,
            )
        return completed.stdout
