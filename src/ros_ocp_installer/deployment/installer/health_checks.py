"""Post-deploy health checks.

The battery depends on the platform. On OpenShift the API is checked from
inside its pod, the ingress and Kruize services through short-lived port
forwards, and routes are probed for information only. On KIND everything is
reached through the ingress host port.

The number of failed counted checks is the result; route probes never count.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger
from rich.markup import escape

from ros_ocp_installer.infra.k8s import PortForwardError, service_port_forward
from ros_ocp_installer.utils.console_like import ConsoleLike

from .constants import DEFAULT_CONSTANTS, InstallerConstants
from .naming import instance_selector, service_name

if TYPE_CHECKING:
    from ros_ocp_installer.config import InstallerSettings

    from ..shell_commands import ShellCommands
    from .platform import RunContext


PortForwardFactory = Callable[..., AbstractContextManager[str]]


@dataclass(frozen=True)
class HealthCheckResult:
    """Outcome of one health check.

    Attributes:
        name: Human-readable check name
        target: URL or resource that was probed
        passed: Whether the check succeeded
        counted: False for informational checks excluded from the failure count
    """

    name: str
    target: str
    passed: bool
    counted: bool = True


@dataclass
class HealthReport:
    """All check results of one run."""

    results: list[HealthCheckResult] = field(default_factory=list)

    @property
    def failures(self) -> int:
        return sum(1 for r in self.results if r.counted and not r.passed)

    @property
    def healthy(self) -> bool:
        return self.failures == 0


class HealthCheckOrchestrator:
    """Runs the platform-specific health check battery."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        settings: InstallerSettings,
        constants: InstallerConstants | None = None,
        *,
        port_forward: PortForwardFactory = service_port_forward,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.commands = commands
        self.console = console
        self.settings = settings
        self.constants = constants or DEFAULT_CONSTANTS
        self._port_forward = port_forward
        self._sleep = sleep

    def run(self, run_context: RunContext) -> HealthReport:
        """Run all checks and print a summary.

        Returns:
            HealthReport; ``report.failures`` is the number of failed checks
        """
        self.console.info("Running health checks...")
        report = HealthReport()

        if run_context.is_openshift:
            self._run_openshift(report)
        else:
            self._run_kubernetes(report)

        if report.healthy:
            self.console.ok("All core services are healthy and operational!")
        else:
            self.console.error(f"{report.failures} core service check(s) failed")
            self.console.info(
                f"Check pod logs: kubectl logs -n {self.settings.namespace} "
                f"-l {instance_selector(self.settings.helm_release_name)}"
            )
        return report

    def _record(
        self,
        report: HealthReport,
        name: str,
        target: str,
        passed: bool,
        *,
        counted: bool = True,
    ) -> bool:
        report.results.append(HealthCheckResult(name, target, passed, counted))
        if not counted:
            if passed:
                self.console.ok(f"  → {name} externally accessible: {target}")
        elif passed:
            self.console.ok(f"✓ {name} is healthy ({target})")
        else:
            self.console.error(f"✗ {name} is not responding ({target})")
        return passed

    def _probe(self, url: str) -> bool:
        return self.commands.http.probe(
            url,
            connect_timeout=self.constants.PROBE_CONNECT_TIMEOUT,
            read_timeout=self.constants.PROBE_READ_TIMEOUT,
        ).ok

    # =========================================================================
    # OpenShift
    # =========================================================================

    def _run_openshift(self, report: HealthReport) -> None:
        c = self.constants
        self.console.info("Testing internal service connectivity...")
        self._check_api_in_pod(report)

        self.console.info("Testing services via port-forwarding...")
        self._check_forwarded(
            report, "Ingress API", "ingress", c.INGRESS_FORWARD_PORTS, "/ready"
        )
        self._check_forwarded(
            report,
            "Kruize API",
            "kruize",
            c.KRUIZE_FORWARD_PORTS,
            "/listPerformanceProfiles",
        )

        self.console.info("Testing external route accessibility (informational)...")
        self._check_routes(report)

    def _check_api_in_pod(self, report: HealthReport) -> None:
        c = self.constants
        namespace = self.settings.namespace
        pods = self.commands.kubectl.get_pods(namespace, c.API_POD_LABEL)
        if not pods:
            self._record(report, "ROS-OCP API", f"pod {c.API_POD_LABEL}", False)
            self.console.error("ROS-OCP API pod not found")
            return

        pod = pods[0].name
        result = self.commands.kubectl.exec_in_pod(
            pod, namespace, ["curl", "-f", "-s", c.API_INTERNAL_STATUS_URL]
        )
        self._record(report, "ROS-OCP API", f"{pod} (internal)", result.success)

    def _check_forwarded(
        self,
        report: HealthReport,
        name: str,
        component: str,
        ports: tuple[int, int],
        path: str,
    ) -> None:
        c = self.constants
        service = service_name(self.settings.helm_release_name, component)
        local_port, remote_port = ports
        passed = False
        try:
            with self._port_forward(
                service,
                self.settings.namespace,
                local_port,
                remote_port,
                wait_time=c.PORT_FORWARD_SETTLE_SECONDS,
                request_timeout=c.PORT_FORWARD_REQUEST_TIMEOUT,
                sleep=self._sleep,
            ) as base_url:
                passed = self._probe(f"{base_url}{path}")
        except PortForwardError as e:
            logger.debug(f"Port forward to {service} failed: {e}")
        self._sleep(c.PORT_FORWARD_GRACE_SECONDS)
        self._record(report, name, f"svc/{service} port-forward {path}", passed)

    def _check_routes(self, report: HealthReport) -> None:
        hosts = {
            r.path: r.host
            for r in self.commands.kubectl.get_routes(self.settings.namespace)
        }
        checks = [
            ("ROS-OCP API", "/", "/status"),
            ("Ingress API", "/api/ingress", "/ready"),
            ("Kruize API", "/api/kruize", "/api/kruize/listPerformanceProfiles"),
        ]

        accessible = 0
        for name, route_path, endpoint in checks:
            host = hosts.get(route_path)
            if not host:
                continue
            url = f"http://{host}{endpoint}"
            if self._record(report, name, url, self._probe(url), counted=False):
                accessible += 1

        if accessible:
            self.console.ok(f"  → {accessible} route(s) externally accessible")
        else:
            self.console.info(
                "  → External routes not accessible (common in internal clusters)"
            )
            api_service = service_name(self.settings.helm_release_name, "rosocp-api")
            self.console.info(
                f"  → Use port-forwarding: kubectl port-forward svc/{api_service} "
                f"-n {self.settings.namespace} 8001:8000"
            )

    # =========================================================================
    # Kubernetes (KIND)
    # =========================================================================

    def _run_kubernetes(self, report: HealthReport) -> None:
        base_url = self.constants.ingress_base_url
        self.console.info(f"Testing connectivity to {base_url}...")

        ready_url = f"{base_url}/ready"
        if not self._record(report, "Ingress API", ready_url, self._probe(ready_url)):
            self.console.info("Debug: testing root endpoint...")
            self.console.print(escape(self.commands.http.verbose_probe(f"{base_url}/")))

        for name, path in (
            ("ROS-OCP API", "/status"),
            ("Kruize API", "/api/kruize/listPerformanceProfiles"),
            ("MinIO console", "/minio/"),
        ):
            url = f"{base_url}{path}"
            self._record(report, name, url, self._probe(url))
