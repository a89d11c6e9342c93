from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from kitchen_puppet.config import KitchenEnvironment, load_options_file
from kitchen_puppet.errors import KitchenPuppetError
from kitchen_puppet.provisioners.puppet_apply import PuppetApplyProvisioner

PHASES = ("init", "install", "prepare", "run")


def _build_provisioner(ctx: click.Context) -> PuppetApplyProvisioner:
    params = ctx.obj
    environment = KitchenEnvironment.from_env(params["kitchen_root"])

    config_file = params["config_file"]
    if config_file is None:
        default = environment.kitchen_root / ".kitchen.yml"
        config_file = default if default.is_file() else None

    try:
        options = load_options_file(config_file) if config_file else {}
        if params["root_path"]:
            # The command line wins over both the kitchen file and KITCHEN_ROOT_PATH.
            options = {**options, "root_path": params["root_path"]}
        return PuppetApplyProvisioner.from_options(options, environment)
    except KitchenPuppetError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with provisioner options (defaults to .kitchen.yml in the kitchen root).",
)
@click.option(
    "--kitchen-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root holding manifests/, modules/ and the Puppetfile.",
)
@click.option("--root-path", help="Destination directory on the target machine.")
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    config_file: Path | None,
    kitchen_root: Path | None,
    root_path: str | None,
) -> None:
    """Stage Puppet code and render the commands that provision a machine with it."""
    load_dotenv()  # Pull KITCHEN_* settings from a local .env into the process env.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"config_file": config_file, "kitchen_root": kitchen_root, "root_path": root_path}


@main.command()
@click.argument("phases", nargs=-1, type=click.Choice(PHASES))
@click.pass_context
def commands(ctx: click.Context, phases: tuple[str, ...]) -> None:
    """Print the shell commands for the given lifecycle phases (default: all)."""
    provisioner = _build_provisioner(ctx)
    for phase in phases or PHASES:
        command = getattr(provisioner, f"{phase}_command")()
        click.echo(f"# {phase}")
        click.echo(command.rstrip("\n") if command else "")


@main.command()
@click.option("--keep", is_flag=True, help="Leave the sandbox in place after staging.")
@click.pass_context
def stage(ctx: click.Context, keep: bool) -> None:
    """Build the local sandbox that would be copied to the target machine."""
    provisioner = _build_provisioner(ctx)
    try:
        sandbox_path = provisioner.create_sandbox()
        click.echo(str(sandbox_path))
        for entry in sorted(sandbox_path.rglob("*")):
            if entry.is_file():
                click.echo(f"  {entry.relative_to(sandbox_path).as_posix()}")
    except (KitchenPuppetError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        if not keep:
            provisioner.cleanup_sandbox()


if __name__ == "__main__":
    main()
