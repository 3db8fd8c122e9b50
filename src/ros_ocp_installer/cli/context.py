"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer

from ros_ocp_installer.config import InstallerSettings, load_settings
from ros_ocp_installer.deployment.installer.constants import (
    InstallerConstants,
    InstallerPaths,
)
from ros_ocp_installer.deployment.shell_commands import ShellCommands
from ros_ocp_installer.utils.log import configure_logging

from .shared.console import CLIConsole, console


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    working_dir: Path
    settings: InstallerSettings
    commands: ShellCommands
    constants: InstallerConstants
    paths: InstallerPaths


def build_cli_context(*, verbose: bool = False) -> CLIContext:
    """Build a fresh CLIContext from the environment.

    Raises:
        pydantic.ValidationError: If an environment variable is invalid
    """
    settings = load_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    working_dir = Path.cwd()
    return CLIContext(
        console=console,
        working_dir=working_dir,
        settings=settings,
        commands=ShellCommands(working_dir),
        constants=InstallerConstants(),
        paths=InstallerPaths(working_dir, settings),
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    verbose = bool(context.meta.get("verbose", False)) if context else False
    return build_cli_context(verbose=verbose)
