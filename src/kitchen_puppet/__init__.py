"""Puppet apply provisioner for test-kitchen style harnesses."""

from __future__ import annotations

from kitchen_puppet.config import KitchenEnvironment, Platform, ProvisionerConfig, resolve_config
from kitchen_puppet.errors import (
    ConfigError,
    DependencyError,
    DependencyResolutionError,
    KitchenPuppetError,
    UnsupportedPlatformError,
)
from kitchen_puppet.provisioners.puppet_apply import PuppetApplyProvisioner

__all__ = [
    "ConfigError",
    "DependencyError",
    "DependencyResolutionError",
    "KitchenEnvironment",
    "KitchenPuppetError",
    "Platform",
    "ProvisionerConfig",
    "PuppetApplyProvisioner",
    "UnsupportedPlatformError",
    "resolve_config",
]
