"""Main CLI application module.

Commands:
- install (default): deploy or upgrade the ROS-OCP chart
- cleanup: remove the deployment
- status: show deployment status
- health: run health checks
"""

import sys
from collections.abc import Sequence
from typing import Annotated

import typer

from .commands import cleanup, health, install, status

COMMANDS: tuple[str, ...] = ("install", "cleanup", "status", "health")
GLOBAL_FLAGS: tuple[str, ...] = ("-v", "--verbose")
HELP_FLAGS: tuple[str, ...] = ("-h", "--help")

_EPILOG = """\
[bold]Environment variables[/bold]

  HELM_RELEASE_NAME        Helm release name (default: ros-ocp)
  NAMESPACE                Target namespace (default: ros-ocp)
  VALUES_FILE              Custom Helm values file
  USE_LOCAL_CHART          Deploy from LOCAL_CHART_PATH (default: false)
  LOCAL_CHART_PATH         Local chart directory (default: ../ros-ocp)
  HELM_TIMEOUT             Helm --timeout value (default: 600s)
  KAFKA_BOOTSTRAP_SERVERS  Use this Kafka and skip Strimzi discovery
  STRIMZI_NAMESPACE        Restrict the Strimzi operator search
  KAFKA_NAMESPACE          Namespace of the Kafka cluster
  CONTAINER_RUNTIME        podman or docker, for KIND diagnostics (default: podman)
  KIND_CLUSTER_NAME        KIND cluster name (default: kind)
"""

app = typer.Typer(
    help="🚀 ROS-OCP Helm chart installer for Kubernetes and OpenShift",
    epilog=_EPILOG,
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": list(HELP_FLAGS)},
)


@app.callback()
def _main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging on stderr"),
    ] = False,
) -> None:
    ctx.meta["verbose"] = verbose


_PASSTHROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}

app.command(name="install", context_settings=_PASSTHROUGH)(install)
app.command(name="cleanup", context_settings=_PASSTHROUGH)(cleanup)
app.command(name="status")(status)
app.command(name="health")(health)


def normalize_args(argv: Sequence[str]) -> list[str]:
    """Map the installer's command line onto the Typer command layout.

    No command means install, ``help`` means ``--help``, and arguments that
    do not start with a known command are handed to install.

    Examples:
        >>> normalize_args([])
        ['install']
        >>> normalize_args(["--set", "a=b"])
        ['install', '--set', 'a=b']
        >>> normalize_args(["-v", "cleanup", "--complete"])
        ['-v', 'cleanup', '--complete']
    """
    args = list(argv)
    prefix: list[str] = []
    while args and args[0] in GLOBAL_FLAGS:
        prefix.append(args.pop(0))

    if not args:
        return [*prefix, "install"]
    if args[0] == "help":
        return [*prefix, "--help"]
    if args[0] in COMMANDS or args[0] in HELP_FLAGS:
        return [*prefix, *args]
    return [*prefix, "install", *args]


def main() -> None:
    """Main entry point for the CLI."""
    app(args=normalize_args(sys.argv[1:]), prog_name="ros-ocp-installer")


if __name__ == "__main__":
    main()
