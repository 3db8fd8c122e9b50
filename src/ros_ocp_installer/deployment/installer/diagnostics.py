"""Read-only troubleshooting for an unreachable KIND ingress.

Each step gathers one piece of evidence and prints it. A step that fails to
gather its evidence prints a placeholder and the cascade carries on; nothing
here changes cluster state.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger
from rich.markup import escape

from ros_ocp_installer.utils.console_like import ConsoleLike

from .constants import DEFAULT_CONSTANTS, InstallerConstants

if TYPE_CHECKING:
    from ros_ocp_installer.config import InstallerSettings

    from ..shell_commands import ShellCommands


_REQUEST_LINE = re.compile(r"GET|POST|PUT|DELETE|HEAD")
_ACCESS_LINE = re.compile(r"access|request|GET|POST", re.IGNORECASE)
_ERROR_LINE = re.compile(r"error", re.IGNORECASE)
_SERVICE_FIELDS = re.compile(r"nodePort|type|ports")


def _matching(text: str, pattern: re.Pattern[str]) -> list[str]:
    return [line for line in text.splitlines() if pattern.search(line)]


@dataclass(frozen=True)
class DiagnosticStep:
    """Outcome of one diagnostic step."""

    title: str
    completed: bool


class IngressDiagnostics:
    """Diagnostic cascade for ingress connectivity failures."""

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

    def run(self, controller_pod: str | None) -> list[DiagnosticStep]:
        """Run every step and report which ones gathered their evidence."""
        self.console.print_subheader("Diagnostics: ingress controller connectivity")

        steps: list[tuple[str, Callable[[], None]]] = [
            ("Service definition", self._service_definition),
            ("Service endpoints", self._endpoints),
            ("Host port", self._host_port),
            ("KIND port mapping", self._runtime_port_mapping),
            ("Verbose HTTP probe", self._verbose_probe),
            ("Controller request logs", lambda: self._request_logs(controller_pod)),
            ("Network policies", self._network_policies),
            ("Controller errors", lambda: self._controller_errors(controller_pod)),
        ]

        outcomes = [self._step(title, fn) for title, fn in steps]

        self.console.error("End of diagnostics")
        self.console.warn(
            "Health checks may fail because of this, but the deployment continues"
        )
        return outcomes

    def _step(self, title: str, fn: Callable[[], None]) -> DiagnosticStep:
        self.console.info(f"{title}:")
        try:
            fn()
        except Exception as e:
            logger.debug(f"Diagnostic step '{title}' failed: {e!r}")
            self.console.print(f"  [dim]({title.lower()} unavailable: {e})[/dim]")
            return DiagnosticStep(title=title, completed=False)
        return DiagnosticStep(title=title, completed=True)

    def _print_block(self, text: str, placeholder: str) -> None:
        text = text.strip()
        self.console.print(escape(text) if text else f"  [dim]{placeholder}[/dim]")

    # =========================================================================
    # Steps
    # =========================================================================

    def _service_definition(self) -> None:
        c = self.constants
        result = self.commands.kubectl.get_resource_text(
            f"service {c.INGRESS_CONTROLLER_SERVICE}",
            c.INGRESS_NAMESPACE,
            output="yaml",
        )
        lines = _matching(result.stdout, _SERVICE_FIELDS)
        self._print_block("\n".join(lines), "Service definition not available")

    def _endpoints(self) -> None:
        c = self.constants
        result = self.commands.kubectl.get_resource_text(
            f"endpoints {c.INGRESS_CONTROLLER_SERVICE}",
            c.INGRESS_NAMESPACE,
            output="wide",
        )
        self._print_block(result.stdout, "Endpoints not available")

    def _host_port(self) -> None:
        port = self.constants.INGRESS_HTTP_PORT
        result = self.commands.host.listening_sockets(port)
        self._print_block(result.stdout, f"Port {port} not found in listening sockets")

    def _runtime_port_mapping(self) -> None:
        runtime = self.settings.container_runtime
        port = self.constants.INGRESS_HTTP_PORT
        if not self.commands.host.tool_available(runtime):
            self.console.warn(
                f"Container runtime '{runtime}' not found for port mapping check"
            )
            self.console.info("Set CONTAINER_RUNTIME (e.g. 'docker' or 'podman')")
            return

        container = f"{self.settings.kind_cluster_name}-control-plane"
        result = self.commands.container.port_mappings(runtime, container)
        self._print_block(result.stdout, f"No port mappings reported for {container}")

        if str(port) in result.stdout:
            self.console.ok(f"Port {port} is mapped in the KIND cluster")
        else:
            self.console.error(f"Port {port} is NOT mapped in the KIND cluster")
            self.console.error(
                "This is likely the root cause of the connectivity issue"
            )
            self.console.info(f"Expected mapping: 0.0.0.0:{port}->80/tcp")

    def _verbose_probe(self) -> None:
        url = f"{self.constants.ingress_base_url}/ready"
        self._print_block(self.commands.http.verbose_probe(url, max_lines=20), "")

    def _request_logs(self, pod: str | None) -> None:
        if not pod:
            self.console.warn("Ingress controller pod not found")
            return

        namespace = self.constants.INGRESS_NAMESPACE
        recent = self.commands.kubectl.get_pod_logs(pod, namespace, since="30s")
        request_lines = _matching(recent.stdout, _REQUEST_LINE)
        if request_lines:
            self.console.ok("Found HTTP request logs in the ingress controller:")
            self._print_block("\n".join(request_lines[:10]), "")
            return

        self.console.warn("No HTTP request logs found in the last 30 seconds")
        self.console.warn("Requests are probably not reaching the controller")
        older = self.commands.kubectl.get_pod_logs(pod, namespace, since="5m")
        access = _matching(older.stdout, _ACCESS_LINE)
        if access:
            self.console.info("Access logs from the last 5 minutes:")
            self._print_block("\n".join(access[-5:]), "")
        else:
            self.console.warn("No access logs at all; the controller may be idle")

    def _network_policies(self) -> None:
        result = self.commands.kubectl.get_resource_text(
            "networkpolicies", all_namespaces=True
        )
        self._print_block(result.stdout, "No network policies found")

    def _controller_errors(self, pod: str | None) -> None:
        if not pod:
            return
        result = self.commands.kubectl.get_pod_logs(
            pod, self.constants.INGRESS_NAMESPACE, tail=50
        )
        errors = _matching(result.stdout, _ERROR_LINE)
        self._print_block("\n".join(errors), "No obvious errors in recent logs")
