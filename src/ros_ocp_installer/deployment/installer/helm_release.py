"""Helm release deployment and user argument handling."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from loguru import logger
from rich.markup import escape

from ros_ocp_installer.utils.console_like import ConsoleLike

from .errors import DeploymentError

if TYPE_CHECKING:
    from ros_ocp_installer.config import InstallerSettings

    from ..shell_commands import ShellCommands
    from .dependencies import KafkaReference
    from .platform import RunContext


HELM_VALUE_FLAGS: tuple[str, ...] = (
    "--set",
    "--set-string",
    "--set-file",
    "--set-json",
)


@dataclass
class HelmArgs:
    """User arguments split into Helm pass-through flags and rejects.

    Attributes:
        forwarded: Flags and values forwarded to Helm, in the order given
        ignored: Arguments that are not Helm value flags
    """

    forwarded: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)


def parse_helm_args(args: Sequence[str]) -> HelmArgs:
    """Collect Helm value flags from free-form arguments.

    Accepts ``--set k=v`` and ``--set=k=v`` (and the ``-string``, ``-file``,
    ``-json`` variants) in any position. Anything else is reported as ignored.
    A value flag at the very end with no value is ignored as well.

    Examples:
        >>> parse_helm_args(["--set", "a=1", "--debug", "--set-string=b=2"])
        HelmArgs(forwarded=['--set', 'a=1', '--set-string=b=2'], ignored=['--debug'])
    """
    parsed = HelmArgs()
    i = 0
    while i < len(args):
        arg = args[i]
        flag = arg.split("=", 1)[0]
        if flag in HELM_VALUE_FLAGS and "=" in arg:
            parsed.forwarded.append(arg)
        elif arg in HELM_VALUE_FLAGS and i + 1 < len(args):
            parsed.forwarded.extend([arg, args[i + 1]])
            i += 1
        else:
            parsed.ignored.append(arg)
        i += 1
    return parsed


def _check_values_yaml(path: Path) -> None:
    """Fail early on a values file Helm would reject as malformed."""
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DeploymentError(f"Values file is not valid YAML: {path}", str(e)) from e
    if data is not None and not isinstance(data, dict):
        raise DeploymentError(
            f"Values file must contain a YAML mapping: {path}",
            f"Found a top-level {type(data).__name__} instead",
        )


class HelmReleaseManager:
    """Runs ``helm upgrade --install`` for the ROS-OCP chart."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        settings: InstallerSettings,
    ) -> None:
        """Initialize the release manager.

        Args:
            commands: Shell command executor
            console: Console for progress output
            settings: Release name, namespace and Helm timeout
        """
        self.commands = commands
        self.console = console
        self.settings = settings

    def set_values(
        self, run_context: RunContext, kafka: KafkaReference | None
    ) -> list[str]:
        """Overrides the installer itself contributes, before user flags."""
        values = list(run_context.platform_overrides)
        if kafka is not None:
            values.append(kafka.helm_override)
        return values

    def build_command(
        self,
        chart: Path,
        run_context: RunContext,
        kafka: KafkaReference | None = None,
        extra_args: Sequence[str] = (),
    ) -> list[str]:
        """Build the full Helm argument list.

        Raises:
            DeploymentError: If the values file is missing or malformed
        """
        values_file = run_context.values_file
        if values_file is not None and not values_file.is_file():
            raise DeploymentError(
                f"Values file not found: {values_file}",
                "Check VALUES_FILE, or unset it to use the chart defaults",
            )
        if values_file is not None:
            _check_values_yaml(values_file)

        return self.commands.helm.build_upgrade_install_command(
            self.settings.helm_release_name,
            chart,
            self.settings.namespace,
            timeout=self.settings.helm_timeout,
            values_file=values_file,
            set_values=self.set_values(run_context, kafka),
            extra_args=extra_args,
        )

    def deploy(
        self,
        chart: Path,
        run_context: RunContext,
        kafka: KafkaReference | None = None,
        extra_args: Sequence[str] = (),
    ) -> None:
        """Install or upgrade the release, streaming Helm's output.

        Raises:
            DeploymentError: If the values file is missing or Helm fails
        """
        self.console.info("Deploying ROS-OCP Helm chart...")
        cmd = self.build_command(chart, run_context, kafka, extra_args)

        if run_context.values_file is not None:
            self.console.info(f"Using values file: {run_context.values_file}")
        if extra_args:
            self.console.info(f"Additional Helm arguments: {' '.join(extra_args)}")
        self.console.info(f"Executing: {' '.join(cmd)}")

        result = self.commands.helm.run_command(
            cmd,
            on_output=lambda line: self.console.print(f"[dim]  {escape(line)}[/dim]"),
        )

        if not result.success:
            logger.debug(f"Helm output:\n{result.stdout}")
            raise DeploymentError(
                "Failed to deploy Helm chart",
                f"helm exited with status {result.returncode}. Inspect the output "
                "above, then re-run; the install is idempotent.",
            )
        self.console.ok("Helm chart deployed successfully")
