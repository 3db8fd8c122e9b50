"""Deployment status summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from ros_ocp_installer.utils.console_like import ConsoleLike

from .constants import DEFAULT_CONSTANTS, InstallerConstants
from .naming import instance_selector

if TYPE_CHECKING:
    from ros_ocp_installer.config import InstallerSettings

    from ..shell_commands import ShellCommands
    from .platform import RunContext


class StatusDisplay:
    """Prints deployment configuration, resources and access points."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        settings: InstallerSettings,
        constants: InstallerConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.settings = settings
        self.constants = constants or DEFAULT_CONSTANTS

    def configuration_table(
        self, run_context: RunContext, extra: dict[str, str] | None = None
    ) -> Table:
        """Build the configuration summary table."""
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Setting", style="bold")
        table.add_column("Value")
        table.add_row("Platform", run_context.platform.value)
        table.add_row("Namespace", self.settings.namespace)
        table.add_row("Helm Release", self.settings.helm_release_name)
        if run_context.values_file is not None:
            table.add_row("Values File", str(run_context.values_file))
        for key, value in (extra or {}).items():
            table.add_row(key, value)
        return table

    def show(self, run_context: RunContext) -> None:
        """Print the full status report."""
        self.console.print_subheader("Deployment Status")
        self.console.print(self.configuration_table(run_context))

        self._section("Pods", "pods", output="wide")
        self._section("Services", "services")
        self._section("Storage", "pvc")

        if run_context.is_openshift:
            self._section("OpenShift Routes", "routes", placeholder="No routes found")
            self._openshift_access_points()
        else:
            self._section("Ingress", "ingress", placeholder="No ingress found")
            self._kind_access_points()

        namespace = self.settings.namespace
        selector = instance_selector(self.settings.helm_release_name)
        self.console.info("Useful Commands:")
        self.console.info(f"  - View logs: kubectl logs -n {namespace} -l {selector}")
        self.console.info("  - Delete deployment: ros-ocp-installer cleanup")
        self.console.info("  - Run health checks: ros-ocp-installer health")

    def show_pods(self) -> None:
        self._section("Pods", "pods", output="wide")

    def _section(
        self,
        title: str,
        resource: str,
        *,
        output: str | None = None,
        placeholder: str = "No resources found",
    ) -> None:
        self.console.info(f"{title}:")
        result = self.commands.kubectl.get_resource_text(
            resource, self.settings.namespace, output=output
        )
        text = result.stdout.strip() if result.success else ""
        self.console.print(escape(text) if text else f"  [dim]{placeholder}[/dim]")
        self.console.print()

    def _openshift_access_points(self) -> None:
        hosts = {
            r.path: r.host
            for r in self.commands.kubectl.get_routes(self.settings.namespace)
        }
        main = hosts.get("/")
        if not main:
            self.console.warn(
                "Routes not found. Use port-forwarding or check route configuration."
            )
            return

        self.console.info("Access Points (via OpenShift Routes):")
        self.console.info(f"  - Main API: http://{main}/status")
        if ingress := hosts.get("/api/ingress"):
            self.console.info(f"  - Ingress API: http://{ingress}/ready")
        if kruize := hosts.get("/api/kruize"):
            self.console.info(
                f"  - Kruize API: http://{kruize}/api/kruize/listPerformanceProfiles"
            )

    def _kind_access_points(self) -> None:
        base = self.constants.ingress_base_url
        c = self.constants
        self.console.info("Access Points (via Ingress - for KIND):")
        self.console.info(f"  - Ingress API: {base}/ready")
        self.console.info(f"  - ROS-OCP API: {base}/status")
        self.console.info(f"  - Kruize API: {base}/api/kruize/listPerformanceProfiles")
        self.console.info(
            f"  - MinIO Console: {base}/minio "
            f"({c.MINIO_ACCESS_KEY}/{c.MINIO_SECRET_KEY})"
        )
