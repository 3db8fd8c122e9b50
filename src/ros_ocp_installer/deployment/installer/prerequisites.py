"""Local tool and cluster access checks run before anything is changed."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ros_ocp_installer.utils.console_like import ConsoleLike

from .errors import DeploymentError

if TYPE_CHECKING:
    from ..shell_commands import ShellCommands


REQUIRED_TOOLS: tuple[str, ...] = ("kubectl", "helm")

_INSTALL_HINTS: dict[str, str] = {
    "kubectl": "https://kubernetes.io/docs/tasks/tools/",
    "helm": "https://helm.sh/docs/intro/install/",
}


class PrerequisiteChecker:
    """Verifies required tools, an active kube context and API connectivity."""

    def __init__(self, commands: ShellCommands, console: ConsoleLike) -> None:
        self.commands = commands
        self.console = console

    def check(self) -> None:
        """Run all checks.

        Raises:
            DeploymentError: On the first failed check, with remediation hints
        """
        self.console.info("Checking prerequisites...")
        self._check_tools()
        context = self._check_context()
        self._check_connectivity(context)
        self.console.ok("All prerequisites are met")

    def _check_tools(self) -> None:
        host = self.commands.host
        missing = [t for t in REQUIRED_TOOLS if not host.tool_available(t)]
        if not missing:
            return

        macos = host.is_macos()
        hints = []
        for tool in missing:
            hint = f"  • {tool}: see {_INSTALL_HINTS[tool]}"
            if macos:
                hint += f" (or: brew install {tool})"
            hints.append(hint)

        raise DeploymentError(
            f"Missing required tools: {', '.join(missing)}",
            "Install the missing tools and re-run:\n" + "\n".join(hints),
        )

    def _check_context(self) -> str:
        context = self.commands.kubectl.get_current_context()
        if not context or context == "none":
            raise DeploymentError(
                "No Kubernetes context is set",
                "Point kubectl at a cluster first:\n"
                "  • KIND:      kind export kubeconfig --name <cluster>\n"
                "  • OpenShift: oc login <api-url> --token=<token>\n"
                "  • Other:     kubectl config use-context <context>",
            )
        self.console.info(f"Using kubectl context: {context}")
        return context

    def _check_connectivity(self, context: str) -> None:
        if not self.commands.kubectl.cluster_reachable():
            raise DeploymentError(
                f"Cannot reach the cluster for context '{context}'",
                "Check that the cluster is running and that your credentials "
                "are valid (try: kubectl get nodes)",
            )
