from __future__ import annotations

import logging
from pathlib import Path

from kitchen_puppet.config import ProvisionerConfig
from kitchen_puppet.sandbox import allocate_sandbox, remove_sandbox

logger = logging.getLogger(__name__)


class BaseProvisioner:
    """Lifecycle plumbing shared by provisioners.

    Owns at most one local sandbox at a time and provides the helpers the
    command-producing phases build on.
    """

    def __init__(
        self,
        config: ProvisionerConfig,
        log: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.logger = log or logger
        self.sandbox_path: Path | None = None

    def info(self, message: str) -> None:
        self.logger.info(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)

    def sudo(self, command: str) -> str:
        return f"sudo -E {command}" if self.config.sudo else command

    def create_sandbox(self) -> Path:
        if self.sandbox_path is not None:
            self.cleanup_sandbox()
        sandbox = allocate_sandbox(self.config.sandbox_root)
        self.sandbox_path = sandbox.root
        self.debug(f"Creating local sandbox {sandbox.id} in {self.sandbox_path}")
        return self.sandbox_path

    def cleanup_sandbox(self) -> None:
        if self.sandbox_path is None:
            return
        self.debug(f"Cleaning up local sandbox in {self.sandbox_path}")
        remove_sandbox(self.sandbox_path)
        self.sandbox_path = None

    def init_command(self) -> str | None:
        return None

    def install_command(self) -> str | None:
        return None

    def prepare_command(self) -> str | None:
        return None

    def run_command(self) -> str | None:
        return None
