from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    command: list[str]
    cwd: str
    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def run_command(
    command: list[str],
    cwd: Path,
    timeout_s: int | None = None,
) -> CommandResult:
    logger.debug("Running %s in %s", " ".join(command), cwd)
    try:
        proc = subprocess.run(
            command,
            cwd=str(cwd),
            text=True,
            capture_output=True,
            timeout=timeout_s,
        )
        return CommandResult(
            command=command,
            cwd=str(cwd),
            exit_code=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )
    except FileNotFoundError as exc:
        # Mirror the shell's "command not found" status.
        return CommandResult(
            command=command,
            cwd=str(cwd),
            exit_code=127,
            stdout="",
            stderr=str(exc),
        )
