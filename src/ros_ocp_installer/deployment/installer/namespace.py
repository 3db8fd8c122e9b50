"""Target namespace preparation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ros_ocp_installer.utils.console_like import ConsoleLike

from .constants import DEFAULT_CONSTANTS, InstallerConstants
from .errors import DeploymentError

if TYPE_CHECKING:
    from ..shell_commands import ShellCommands


class NamespaceManager:
    """Creates the target namespace and labels it for cost management."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        constants: InstallerConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.constants = constants or DEFAULT_CONSTANTS

    def ensure(self, namespace: str) -> None:
        """Create ``namespace`` if needed and apply the optimization label.

        Raises:
            DeploymentError: If the namespace cannot be created
        """
        kubectl = self.commands.kubectl
        if kubectl.namespace_exists(namespace):
            self.console.warn(f"Namespace '{namespace}' already exists")
        else:
            self.console.info(f"Creating namespace: {namespace}")
            result = kubectl.create_namespace(namespace)
            if not result.success:
                raise DeploymentError(
                    f"Failed to create namespace '{namespace}'", result.stderr or None
                )
            self.console.ok(f"Namespace '{namespace}' created")

        labels = self.constants.namespace_labels
        result = kubectl.label_namespace(namespace, labels)
        if result.success:
            label_text = ", ".join(f"{k}={v}" for k, v in labels.items())
            self.console.ok(f"Namespace labeled with {label_text}")
        else:
            self.console.warn(
                f"Could not label namespace '{namespace}': {result.stderr.strip()}"
            )
