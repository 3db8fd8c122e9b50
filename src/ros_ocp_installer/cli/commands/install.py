"""The install command (also the default when no command is given)."""

import typer

from ros_ocp_installer.cli.context import get_cli_context
from ros_ocp_installer.cli.shared.console import with_error_handling
from ros_ocp_installer.deployment.installer.helm_release import parse_helm_args

from .shared import get_installer


@with_error_handling
def install(ctx: typer.Context) -> None:
    """Install or upgrade the ROS-OCP Helm chart.

    Verifies prerequisites, detects the platform, prepares the namespace,
    storage credentials and Kafka connectivity, deploys the chart and runs
    health checks. Extra [bold]--set[/bold], [bold]--set-string[/bold],
    [bold]--set-file[/bold] and [bold]--set-json[/bold] flags are passed to
    Helm unchanged.

    Examples:
        ros-ocp-installer
        ros-ocp-installer install --set global.storageClass=standard
        USE_LOCAL_CHART=true LOCAL_CHART_PATH=./ros-ocp ros-ocp-installer
    """
    cli = get_cli_context(ctx)
    helm_args = parse_helm_args(ctx.args)
    for arg in helm_args.ignored:
        cli.console.warn(f"Unknown argument: {arg} (ignoring)")

    cli.console.print_header("ROS-OCP Helm Chart Installation")
    get_installer(cli).install(helm_args.forwarded)
