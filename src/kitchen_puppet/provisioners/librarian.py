from __future__ import annotations

import logging
import os
import shutil
import sys
import threading
from pathlib import Path
from typing import ClassVar

from kitchen_puppet.errors import DependencyError, DependencyResolutionError
from kitchen_puppet.provisioners.command_runner import CommandResult, run_command

logger = logging.getLogger(__name__)

LIBRARIAN_BIN_ENV = "KITCHEN_PUPPET_LIBRARIAN_BIN"


def _resolve_librarian_command() -> list[str] | None:
    """Return a runnable librarian-puppet command, or None if none is found.

    Preference order:
    0) `KITCHEN_PUPPET_LIBRARIAN_BIN` explicit override
    1) `librarian-puppet` found on PATH
    2) `librarian-puppet` next to the running Python interpreter (venv-local bin)
    """
    override = os.environ.get(LIBRARIAN_BIN_ENV)
    if override:
        return [override]

    on_path = shutil.which("librarian-puppet")
    if on_path:
        return [on_path]

    # Bundled installs sometimes drop the binstub beside the interpreter.
    candidate = Path(sys.executable).resolve().parent / "librarian-puppet"
    if candidate.exists():
        return [str(candidate)]

    return None


class Librarian:
    """Resolves a Puppetfile into a modules directory with librarian-puppet.

    librarian-puppet keeps a shared cache under the user's home, so only one
    resolution may run per process at a time. Callers hold ``Librarian.lock``
    around :meth:`resolve`.
    """

    lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, puppetfile: Path, path: Path, log: logging.Logger | None = None) -> None:
        self.puppetfile = Path(puppetfile)
        self.path = Path(path)
        self.logger = log or logger

    @classmethod
    def load(cls, log: logging.Logger | None = None) -> list[str]:
        """Check that librarian-puppet can be run; return its command."""
        command = _resolve_librarian_command()
        if command is None:
            raise DependencyError(
                "Could not find librarian-puppet. Install it (gem install librarian-puppet) "
                f"or set {LIBRARIAN_BIN_ENV}."
            )
        (log or logger).debug("Librarian-Puppet available at %s", command[0])
        return command

    def resolve(self) -> CommandResult:
        command = self.load(self.logger)
        self.logger.info("Resolving module dependencies with Librarian-Puppet")
        self.logger.debug("Using Puppetfile from %s", self.puppetfile)

        self.path.mkdir(parents=True, exist_ok=True)
        result = run_command(
            [*command, "install", "--path", str(self.path)],
            cwd=self.puppetfile.parent,
        )
        if not result.ok:
            raise DependencyResolutionError(
                f"librarian-puppet failed (exit {result.exit_code}): {result.stderr.strip()[:500]}",
                result=result,
            )
        return result
