"""Shell command abstractions for the ROS-OCP installer.

This package provides one interface per external dependency:

- helm: Helm release management
- kubectl: Kubernetes resources (sync wrapper over the kr8s controller)
- http: Health probes, release metadata and chart downloads
- container: Container runtime port mappings (KIND diagnostics)
- host: Local tool and socket inspection

Usage:
    from ros_ocp_installer.deployment.shell_commands import ShellCommands

    commands = ShellCommands(Path("."))
    if commands.kubectl.namespace_exists("ros-ocp"):
        ...
"""

from pathlib import Path

from ros_ocp_installer.infra.k8s.controller import KubernetesController

from .container import ContainerRuntimeCommands
from .helm import HelmCommands
from .host import HostCommands
from .http import HttpCommands
from .kubectl import KubectlCommands
from .runner import CommandRunner
from .types import CommandResult, HelmRelease, ProbeResult


class ShellCommands:
    """Unified interface for all external command operations.

    Attributes:
        helm: Helm-related commands
        kubectl: Kubernetes commands
        http: HTTP probes and downloads
        container: Container runtime commands
        host: Local host inspection
    """

    def __init__(
        self,
        working_dir: Path,
        *,
        controller: KubernetesController | None = None,
    ) -> None:
        """Initialize the shell commands executor.

        Args:
            working_dir: Directory commands are executed from
            controller: Kubernetes controller override
        """
        self._working_dir = Path(working_dir)
        self._runner = CommandRunner(self._working_dir)

        self.helm = HelmCommands(self._runner)
        self.kubectl = KubectlCommands(controller)
        self.http = HttpCommands()
        self.container = ContainerRuntimeCommands(self._runner)
        self.host = HostCommands(self._runner)

    @property
    def working_dir(self) -> Path:
        return self._working_dir


__all__ = [
    "ShellCommands",
    "CommandRunner",
    "CommandResult",
    "HelmRelease",
    "ProbeResult",
    "HelmCommands",
    "KubectlCommands",
    "HttpCommands",
    "ContainerRuntimeCommands",
    "HostCommands",
]
