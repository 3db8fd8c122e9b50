"""The status command."""

import typer

from ros_ocp_installer.cli.context import get_cli_context
from ros_ocp_installer.cli.shared.console import with_error_handling

from .shared import get_installer


@with_error_handling
def status(ctx: typer.Context) -> None:
    """Show pods, services, storage and access points of the deployment."""
    cli = get_cli_context(ctx)
    get_installer(cli).status()
