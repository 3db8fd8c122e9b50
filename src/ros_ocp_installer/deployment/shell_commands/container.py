"""Container runtime command abstractions.

Used to inspect the KIND control-plane container when the ingress port on
localhost does not answer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class ContainerRuntimeCommands:
    """Podman/Docker shell commands.

    Provides operations for:
    - Listing host port mappings of a container
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize container runtime commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def port_mappings(self, runtime: str, container: str) -> CommandResult:
        """List the published ports of a container.

        Args:
            runtime: Runtime executable, e.g. "podman" or "docker"
            container: Container name (e.g., "kind-control-plane")

        Returns:
            CommandResult whose stdout holds one mapping per line,
            e.g. "80/tcp -> 0.0.0.0:32061"

        Example:
            >>> container.port_mappings("podman", "kind-control-plane")
        """
        return self._runner.run([runtime, "port", container], timeout=30)
