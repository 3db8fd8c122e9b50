"""Post-deploy readiness waits.

Neither the release pod wait nor the ingress check can fail the install;
both report what they saw and let the pipeline continue.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from rich.markup import escape

from ros_ocp_installer.utils.console_like import ConsoleLike
from ros_ocp_installer.utils.polling import poll_until

from .constants import DEFAULT_CONSTANTS, InstallerConstants
from .diagnostics import IngressDiagnostics
from .naming import instance_selector

if TYPE_CHECKING:
    from ros_ocp_installer.config import InstallerSettings
    from ros_ocp_installer.infra.k8s.controller import PodInfo

    from ..shell_commands import ShellCommands
    from .platform import RunContext


class ReadinessPoller:
    """Waits for release pods and, on KIND, for the ingress controller."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        settings: InstallerSettings,
        constants: InstallerConstants | None = None,
        *,
        diagnostics: IngressDiagnostics | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.commands = commands
        self.console = console
        self.settings = settings
        self.constants = constants or DEFAULT_CONSTANTS
        self.diagnostics = diagnostics or IngressDiagnostics(
            commands, console, settings, self.constants
        )
        self._sleep = sleep

    # =========================================================================
    # Release Pods
    # =========================================================================

    def wait_for_release_pods(self) -> bool:
        """Wait for every non-completed pod of the release to become Ready.

        Returns:
            True if all pods became ready within the timeout
        """
        self.console.info("Waiting for pods to be ready...")
        result = self.commands.kubectl.wait_for_pods(
            self.settings.namespace,
            instance_selector(self.settings.helm_release_name),
            timeout=self.constants.POD_READY_TIMEOUT,
            field_selector=self.constants.POD_FIELD_SELECTOR,
        )
        if result.success:
            self.console.ok("All pods are ready")
            return True

        self.console.warn("Some pods are not ready yet. Continuing...")
        if result.stderr.strip():
            self.console.print(f"[dim]{escape(result.stderr.strip())}[/dim]")
        return False

    # =========================================================================
    # Ingress Controller
    # =========================================================================

    def check_ingress(self, run_context: RunContext) -> bool:
        """Check that the ingress controller answers on the KIND host port.

        Skipped on OpenShift, where routes replace the ingress controller.

        Returns:
            True if the ingress answered (or the check does not apply)
        """
        if run_context.is_openshift:
            self.console.info("Skipping ingress readiness check on OpenShift")
            return True

        self.console.info("Checking ingress controller readiness...")
        pod = self._ensure_controller_ready()
        if pod is not None:
            self._check_controller_logs(pod.name)
        self._check_endpoints()

        reachable = self._probe_ingress()
        if not reachable:
            self.console.error(
                "Ingress controller is NOT reachable over HTTP despite readiness checks"
            )
            self.diagnostics.run(pod.name if pod else None)

        self.console.info("Ingress readiness check completed")
        return reachable

    def _controller_pod(self) -> PodInfo | None:
        pods = self.commands.kubectl.get_pods(
            self.constants.INGRESS_NAMESPACE, self.constants.INGRESS_CONTROLLER_LABEL
        )
        return pods[0] if pods else None

    def _ensure_controller_ready(self) -> PodInfo | None:
        pod = self._controller_pod()
        if pod is not None and pod.status == "Running" and pod.ready:
            return pod

        status = pod.status if pod else "missing"
        self.console.warn(f"Ingress controller pod not ready (status: {status})")
        self.console.info("Waiting for ingress controller to be ready...")
        result = self.commands.kubectl.wait_for_pods(
            self.constants.INGRESS_NAMESPACE,
            self.constants.INGRESS_CONTROLLER_LABEL,
            timeout=self.constants.INGRESS_POD_READY_TIMEOUT,
        )
        if not result.success:
            self.console.warn("Ingress controller did not become ready in time")
        return self._controller_pod()

    def _check_controller_logs(self, pod: str) -> None:
        result = self.commands.kubectl.get_pod_logs(
            pod, self.constants.INGRESS_NAMESPACE, tail=20
        )
        markers = self.constants.INGRESS_LOG_MARKERS
        if all(marker in result.stdout for marker in markers):
            self.console.ok("Ingress controller logs show complete initialization")
            return

        self.console.warn("Ingress controller logs don't show complete initialization")
        recent = result.stdout.strip().splitlines()[-5:]
        if recent:
            self.console.info("Recent logs:")
            self.console.print(escape("\n".join(recent)))

    def _check_endpoints(self) -> None:
        addresses = self.commands.kubectl.get_endpoint_addresses(
            self.constants.INGRESS_CONTROLLER_SERVICE,
            self.constants.INGRESS_NAMESPACE,
        )
        if addresses:
            self.console.ok("Ingress controller service has ready endpoints")
        else:
            self.console.warn("Ingress controller service endpoints not ready yet")

    def _probe_ingress(self) -> bool:
        c = self.constants
        url = f"{c.ingress_base_url}/ready"
        self.console.info(f"Testing connectivity to {url}...")

        def _reachable() -> bool:
            return self.commands.http.probe(
                url,
                connect_timeout=c.PROBE_CONNECT_TIMEOUT,
                read_timeout=c.PROBE_READ_TIMEOUT,
            ).ok

        attempts = c.INGRESS_PROBE_ATTEMPTS
        result = poll_until(
            _reachable,
            interval=c.INGRESS_PROBE_INTERVAL,
            timeout=c.INGRESS_PROBE_INTERVAL * (attempts - 1),
            on_wait=lambda elapsed: self.console.info(
                "Testing connectivity... "
                f"({int(elapsed // c.INGRESS_PROBE_INTERVAL) + 1}/{attempts})"
            ),
            sleep=self._sleep,
        )
        if result.satisfied:
            self.console.ok("Ingress controller is accessible via HTTP")
        return result.satisfied
