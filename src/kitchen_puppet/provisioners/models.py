from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_APT_REPO = "http://apt.puppetlabs.com/puppetlabs-release-precise.deb"
DEFAULT_YUM_REPO = "https://yum.puppetlabs.com/puppetlabs-release-el-6.noarch.rpm"


class ProvisionerOptions(BaseModel):
    """User-facing provisioner keys, as written in the kitchen config."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    manifest: str = "site.pp"
    manifests_path: str | None = None
    modules_path: str | None = None
    hiera_data_path: str | None = None
    hiera_config_path: str | None = None

    puppet_platform: str = "ubuntu"
    puppet_version: str | None = None
    puppet_apt_repo: str = DEFAULT_APT_REPO
    puppet_yum_repo: str = DEFAULT_YUM_REPO
    # Accepted so existing kitchen files keep loading; no omnibus installer is rendered.
    require_puppet_omnibus: bool = False
    puppet_omnibus_url: str | None = None

    puppet_debug: bool = False
    puppet_verbose: bool = False
    puppet_noop: bool = False
    update_packages: bool = True
    custom_facts: dict[str, Any] = {}
    sudo: bool = True
    root_path: str | None = None

    @field_validator("puppet_platform", mode="before")
    @classmethod
    def _normalize_platform(cls, value: Any) -> str:
        # Matching is case-insensitive; membership is checked during resolution.
        return str(value).strip().lower()

    @field_validator("puppet_version", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> str | None:
        # YAML reads `puppet_version: 3.4` as a float.
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("custom_facts", mode="before")
    @classmethod
    def _default_facts(cls, value: Any) -> Any:
        return {} if value is None else value
