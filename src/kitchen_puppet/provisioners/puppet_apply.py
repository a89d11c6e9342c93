from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from kitchen_puppet.commands import CommandBuilder
from kitchen_puppet.config import KitchenEnvironment, Platform, ProvisionerConfig, resolve_config
from kitchen_puppet.provisioners.base import BaseProvisioner
from kitchen_puppet.provisioners.librarian import Librarian
from kitchen_puppet.sandbox import copy_file, mirror_contents

# Removed by init_command alongside the staged tree under root_path.
SYSTEM_HIERA_PATHS = ("/var/lib/hiera", "/etc/hiera.yaml", "/etc/puppet/hiera.yaml")
STAGED_ENTRIES = ("modules", "manifests", "hiera", "hiera.yaml")


def _fact_value(value: Any) -> str:
    # Facter reads booleans and nil the way Ruby interpolates them.
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class PuppetApplyProvisioner(BaseProvisioner):
    """Stages a Puppet codebase and emits the commands that `puppet apply` it.

    The host runtime calls the phases in order: ``init_command``,
    ``install_command``, ``create_sandbox``, ``prepare_command``,
    ``run_command`` and finally ``cleanup_sandbox``.
    """

    def __init__(
        self,
        config: ProvisionerConfig,
        log: logging.Logger | None = None,
        librarian: type[Librarian] = Librarian,
    ) -> None:
        super().__init__(config, log=log)
        self.librarian = librarian

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, Any] | None,
        environment: KitchenEnvironment,
        **kwargs: Any,
    ) -> "PuppetApplyProvisioner":
        provisioner = cls(resolve_config(options, environment), **kwargs)
        provisioner.load_needed_dependencies()
        return provisioner

    # -- remote commands ---------------------------------------------------

    def install_command(self) -> str:
        self.info("installing puppet")
        cfg = self.config
        package = f"puppet{cfg.platform.version_suffix(cfg.puppet_version) or ''}"

        steps = CommandBuilder(separator="\n  ")
        if cfg.platform is Platform.DEBIAN_FAMILY:
            steps.add(
                f"{self.sudo('wget')} {cfg.puppet_apt_repo}",
                f"{self.sudo('dpkg')} -i {self.puppet_apt_repo_file}",
            )
            steps.add_if(cfg.update_packages, f"{self.sudo('apt-get')} -y update")
            steps.add(f"{self.sudo('apt-get')} -y install {package}")
        else:
            steps.add(f"{self.sudo('rpm')} -ivh {cfg.puppet_yum_repo}")
            steps.add_if(cfg.update_packages, f"{self.sudo('yum')} -y update")
            steps.add(f"{self.sudo('yum')} -y install {package}")

        return f"if [ ! $(which puppet) ]; then\n  {steps.render()}\nfi\n"

    def init_command(self) -> str:
        dirs = [self.remote_path(entry) for entry in STAGED_ENTRIES]
        targets = " ".join([*dirs, *SYSTEM_HIERA_PATHS])
        cmd = f"{self.sudo('rm')} -rf {targets}; mkdir -p {self.config.root_path}"
        self.debug(cmd)
        return cmd

    def prepare_command(self) -> str:
        commands = CommandBuilder(separator=" && ")

        if self.config.hiera_config_path:
            hiera_yaml = self.remote_path("hiera.yaml")
            commands.add(
                f"{self.sudo('cp')} {hiera_yaml} /etc/",
                f"{self.sudo('cp')} {hiera_yaml} /etc/puppet/",
            )

        if self.config.hiera_data_path:
            commands.add(f"{self.sudo('cp -r')} {self.remote_path('hiera')} /var/lib/")

        command = commands.render()
        self.debug(command)
        return command

    def run_command(self) -> str:
        cfg = self.config
        return CommandBuilder(
            fragments=[
                self.custom_facts_export(),
                self.sudo("puppet"),
                "apply",
                self.remote_path("manifests", cfg.manifest),
                f"--modulepath={self.remote_path('modules')}",
                f"--manifestdir={self.remote_path('manifests')}",
                "--noop" if cfg.puppet_noop else None,
                "-v" if cfg.puppet_verbose else None,
                "-d" if cfg.puppet_debug else None,
            ]
        ).render()

    # -- local sandbox -----------------------------------------------------

    def create_sandbox(self, pre_stage: Callable[[Path], None] | None = None) -> Path:
        sandbox_path = super().create_sandbox()

        if pre_stage is not None:
            pre_stage(sandbox_path)

        self.prepare_modules()
        self.prepare_manifests()
        self.prepare_hiera_config()
        self.prepare_hiera_data()
        self.info("Finished Preparing files for transfer")
        return sandbox_path

    def prepare_modules(self) -> None:
        self.info("Preparing modules")
        if self.config.puppetfile.exists():
            self.resolve_with_librarian()
        self.debug(f"Using modules from {self.config.modules_path}")
        mirror_contents(self.config.modules_path, self.tmp_modules_dir)

    def prepare_manifests(self) -> None:
        self.info("Preparing manifests")
        self.debug(f"Using manifests from {self.config.manifests_path}")
        mirror_contents(self.config.manifests_path, self._sandbox / "manifests")

    def prepare_hiera_config(self) -> None:
        if not self.config.hiera_config_path:
            return
        self.info("Preparing hiera")
        self.debug(f"Using hiera from {self.config.hiera_config_path}")
        copy_file(self.config.hiera_config_path, self._sandbox / "hiera.yaml")

    def prepare_hiera_data(self) -> None:
        if not self.config.hiera_data_path:
            return
        self.info("Preparing hiera data")
        self.debug(f"Using hiera data from {self.config.hiera_data_path}")
        mirror_contents(self.config.hiera_data_path, self._sandbox / "hiera")

    def resolve_with_librarian(self) -> None:
        with self.librarian.lock:
            self.librarian(self.config.puppetfile, self.tmp_modules_dir, self.logger).resolve()

    def load_needed_dependencies(self) -> None:
        """Fail early if a Puppetfile needs a resolver that cannot run."""
        if self.config.puppetfile.exists():
            self.debug(f"Puppetfile found at {self.config.puppetfile}, loading Librarian-Puppet")
            self.librarian.load(self.logger)

    # -- helpers -----------------------------------------------------------

    @property
    def _sandbox(self) -> Path:
        if self.sandbox_path is None:
            raise RuntimeError("Sandbox has not been created")
        return self.sandbox_path

    @property
    def tmp_modules_dir(self) -> Path:
        return self._sandbox / "modules"

    @property
    def puppet_apt_repo_file(self) -> str:
        return self.config.puppet_apt_repo.rstrip("/").split("/")[-1]

    def remote_path(self, *parts: str) -> str:
        return posixpath.join(self.config.root_path, *parts)

    def custom_facts_export(self) -> str | None:
        if not self.config.custom_facts:
            return None
        bash_vars = " ".join(
            f"FACTER_{key}={_fact_value(value)}" for key, value in self.config.custom_facts.items()
        )
        bash_vars = f"export {bash_vars};"
        self.debug(bash_vars)
        return bash_vars
