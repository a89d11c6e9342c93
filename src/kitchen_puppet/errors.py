from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kitchen_puppet.provisioners.command_runner import CommandResult


class KitchenPuppetError(Exception):
    """Base class for provisioner failures."""


class ConfigError(KitchenPuppetError, ValueError):
    """Provisioner options are missing or invalid."""


class UnsupportedPlatformError(ConfigError):
    def __init__(self, platform: str) -> None:
        self.platform = platform
        super().__init__(
            f"Unsupported puppet_platform '{platform}'. "
            "Use one of: debian, ubuntu, redhat, centos, fedora."
        )


class DependencyError(KitchenPuppetError, RuntimeError):
    """An external collaborator needed for provisioning is unavailable."""


class DependencyResolutionError(DependencyError):
    def __init__(self, message: str, result: CommandResult | None = None) -> None:
        self.result = result
        super().__init__(message)
