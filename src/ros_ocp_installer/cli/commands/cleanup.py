"""The cleanup command."""

from typing import Annotated

import typer

from ros_ocp_installer.cli.context import get_cli_context
from ros_ocp_installer.cli.shared.console import with_error_handling

from .shared import get_installer


@with_error_handling
def cleanup(
    ctx: typer.Context,
    complete: Annotated[
        bool,
        typer.Option(
            "--complete",
            help="Also delete PersistentVolumes left bound to the namespace",
        ),
    ] = False,
) -> None:
    """Remove the Helm release, its PVCs and the namespace.

    Strimzi/Kafka and Keycloak are left in place.

    Examples:
        ros-ocp-installer cleanup
        ros-ocp-installer cleanup --complete
    """
    cli = get_cli_context(ctx)
    for arg in ctx.args:
        cli.console.warn(f"Unknown cleanup option: {arg}")

    cli.console.print_header("ROS-OCP Cleanup", style="red")
    get_installer(cli).cleanup(complete=complete)
