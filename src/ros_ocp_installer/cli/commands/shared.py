"""Helpers shared by the command modules."""

from __future__ import annotations

from ros_ocp_installer.cli.context import CLIContext
from ros_ocp_installer.deployment.installer import RosInstaller


def get_installer(cli: CLIContext) -> RosInstaller:
    """Build the installer pipeline for the current CLI context."""
    return RosInstaller(
        console=cli.console,
        settings=cli.settings,
        commands=cli.commands,
        paths=cli.paths,
        constants=cli.constants,
    )
