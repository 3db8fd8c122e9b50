"""The health command."""

import typer

from ros_ocp_installer.cli.context import get_cli_context
from ros_ocp_installer.cli.shared.console import with_error_handling

from .shared import get_installer


@with_error_handling
def health(ctx: typer.Context) -> None:
    """Run the health checks against an existing deployment.

    The exit status is the number of failed checks (0 when healthy).
    """
    cli = get_cli_context(ctx)
    report = get_installer(cli).health()
    if report.failures:
        raise typer.Exit(report.failures)
