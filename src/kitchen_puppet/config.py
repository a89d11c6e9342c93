from __future__ import annotations

import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import ValidationError

from kitchen_puppet.errors import ConfigError, UnsupportedPlatformError
from kitchen_puppet.provisioners.models import ProvisionerOptions

DEFAULT_ROOT_PATH = "/tmp/kitchen"


class Platform(str, Enum):
    DEBIAN_FAMILY = "debian_family"
    REDHAT_FAMILY = "redhat_family"

    @classmethod
    def parse(cls, value: str) -> "Platform":
        family = _PLATFORM_ALIASES.get(str(value).strip().lower())
        if family is None:
            raise UnsupportedPlatformError(str(value))
        return family

    def version_suffix(self, version: str | None) -> str | None:
        """Package version pin in the form the family's package manager expects."""
        if not version:
            return None
        if self is Platform.DEBIAN_FAMILY:
            return f"={version}"
        return f"-{version}"


_PLATFORM_ALIASES: dict[str, Platform] = {
    "debian": Platform.DEBIAN_FAMILY,
    "ubuntu": Platform.DEBIAN_FAMILY,
    "redhat": Platform.REDHAT_FAMILY,
    "centos": Platform.REDHAT_FAMILY,
    "fedora": Platform.REDHAT_FAMILY,
}


@dataclass(frozen=True)
class KitchenEnvironment:
    """Values supplied by the host harness rather than by the user."""

    kitchen_root: Path
    root_path: str = DEFAULT_ROOT_PATH
    sandbox_root: Path | None = None
    test_base_path: Path | None = None
    suite_name: str | None = None

    @property
    def base_path(self) -> Path:
        return self.test_base_path or self.kitchen_root / "test" / "integration"

    @staticmethod
    def from_env(kitchen_root: Path | None = None) -> "KitchenEnvironment":
        root = kitchen_root or Path(os.environ.get("KITCHEN_ROOT") or Path.cwd())
        sandbox_root = os.environ.get("KITCHEN_SANDBOX_ROOT")
        test_base = os.environ.get("KITCHEN_TEST_BASE_PATH")
        return KitchenEnvironment(
            kitchen_root=Path(root).resolve(),
            root_path=os.environ.get("KITCHEN_ROOT_PATH") or DEFAULT_ROOT_PATH,
            sandbox_root=Path(sandbox_root) if sandbox_root else None,
            test_base_path=Path(test_base) if test_base else None,
            suite_name=os.environ.get("KITCHEN_SUITE") or None,
        )


@dataclass(frozen=True)
class ProvisionerConfig:
    """Fully resolved, read-only provisioner configuration."""

    manifest: str
    manifests_path: Path
    modules_path: Path
    hiera_data_path: Path | None
    hiera_config_path: Path | None
    platform: Platform
    puppet_version: str | None
    puppet_apt_repo: str
    puppet_yum_repo: str
    puppet_debug: bool
    puppet_verbose: bool
    puppet_noop: bool
    update_packages: bool
    custom_facts: Mapping[str, Any]
    sudo: bool
    root_path: str
    kitchen_root: Path
    sandbox_root: Path

    @property
    def puppetfile(self) -> Path:
        return self.kitchen_root / "Puppetfile"


def calculate_path(environment: KitchenEnvironment, name: str, kind: str = "directory") -> Path | None:
    """Find ``name`` in the conventional project locations.

    Checks the suite directory under the test base path, then the test base
    path itself, then the kitchen root. Returns the first match of the
    requested kind (``"directory"`` or ``"file"``).
    """
    candidates: list[Path] = []
    if environment.suite_name:
        candidates.append(environment.base_path / environment.suite_name / name)
    candidates.append(environment.base_path / name)
    candidates.append(environment.kitchen_root / name)

    for candidate in candidates:
        if kind == "file" and candidate.is_file():
            return candidate
        if kind == "directory" and candidate.is_dir():
            return candidate
    return None


def _explicit_path(environment: KitchenEnvironment, value: str | None) -> Path | None:
    if not value:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else environment.kitchen_root / path


def _required_path(environment: KitchenEnvironment, key: str, value: str | None, name: str) -> Path:
    path = _explicit_path(environment, value) or calculate_path(environment, name)
    if path is None:
        raise ConfigError(f"No {key} detected. Please specify one in .kitchen.yml")
    return path


def resolve_config(
    options: ProvisionerOptions | Mapping[str, Any] | None,
    environment: KitchenEnvironment,
) -> ProvisionerConfig:
    """Validate options and resolve every conventional default once."""
    if not isinstance(options, ProvisionerOptions):
        try:
            options = ProvisionerOptions.model_validate(dict(options or {}))
        except ValidationError as exc:
            raise ConfigError(f"Invalid provisioner options: {exc}") from exc

    platform = Platform.parse(options.puppet_platform)

    manifests_path = _required_path(environment, "manifests_path", options.manifests_path, "manifests")
    modules_path = _required_path(environment, "modules_path", options.modules_path, "modules")
    hiera_data_path = _explicit_path(environment, options.hiera_data_path) or calculate_path(
        environment, "hiera"
    )
    hiera_config_path = _explicit_path(environment, options.hiera_config_path) or calculate_path(
        environment, "hiera.yaml", kind="file"
    )

    return ProvisionerConfig(
        manifest=options.manifest,
        manifests_path=manifests_path,
        modules_path=modules_path,
        hiera_data_path=hiera_data_path,
        hiera_config_path=hiera_config_path,
        platform=platform,
        puppet_version=options.puppet_version,
        puppet_apt_repo=options.puppet_apt_repo,
        puppet_yum_repo=options.puppet_yum_repo,
        puppet_debug=options.puppet_debug,
        puppet_verbose=options.puppet_verbose,
        puppet_noop=options.puppet_noop,
        update_packages=options.update_packages,
        custom_facts=MappingProxyType(dict(options.custom_facts)),
        sudo=options.sudo,
        root_path=options.root_path or environment.root_path,
        kitchen_root=environment.kitchen_root,
        sandbox_root=environment.sandbox_root or Path(tempfile.gettempdir()),
    )


def load_options_file(path: Path) -> dict[str, Any]:
    """Read provisioner options from a YAML file.

    Accepts either a full kitchen document (the ``provisioner`` mapping is
    used) or a bare mapping of provisioner keys.
    """
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigError(f"Expected a mapping in {path}")

    options = document.get("provisioner", document)
    if not isinstance(options, dict):
        raise ConfigError(f"Expected 'provisioner' to be a mapping in {path}")
    # test-kitchen selects the provisioner by name; it is not an option here.
    return {k: v for k, v in options.items() if k != "name"}
