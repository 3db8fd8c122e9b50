"""ROS-OCP installer pipeline.

RosInstaller wires the specialized components together and runs them in
order. Fatal phases raise DeploymentError; advisory phases (readiness,
ingress, health) only print warnings.

The install workflow:
1. Check local tools and cluster access
2. Detect the platform and resolve values file / overrides
3. Detect Keycloak (OpenShift only)
4. Prepare and label the namespace
5. Provision object storage credentials
6. Verify Kafka and resolve the bootstrap address
7. Resolve the chart and run helm upgrade --install
8. Wait for pods, show status, check ingress, run health checks
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from ros_ocp_installer.config import InstallerSettings
from ros_ocp_installer.utils.console_like import ConsoleLike

from .chart_source import ChartSource
from .cleanup import CleanupController, CleanupReport
from .constants import DEFAULT_CONSTANTS, InstallerConstants, InstallerPaths
from .dependencies import (
    KafkaReference,
    KafkaVerifier,
    KeycloakDetector,
    KeycloakReference,
)
from .health_checks import HealthCheckOrchestrator, HealthReport
from .helm_release import HelmReleaseManager
from .namespace import NamespaceManager
from .platform import Platform, PlatformDetector, RunContext
from .prerequisites import PrerequisiteChecker
from .readiness import ReadinessPoller
from .secret_manager import StorageSecretProvisioner
from .status_display import StatusDisplay

if TYPE_CHECKING:
    from ..shell_commands import ShellCommands


@dataclass(frozen=True)
class InstallOutcome:
    """Everything the install pipeline resolved along the way."""

    run_context: RunContext
    kafka: KafkaReference
    keycloak: KeycloakReference | None
    health: HealthReport


class RosInstaller:
    """Orchestrates install, status, health and cleanup operations.

    Attributes:
        settings: Environment settings for this run
        constants: Fixed names, ports and timeouts
        paths: File location resolver
        commands: Shell command executor
    """

    def __init__(
        self,
        console: ConsoleLike,
        settings: InstallerSettings,
        commands: ShellCommands,
        paths: InstallerPaths,
        constants: InstallerConstants | None = None,
    ) -> None:
        self.console = console
        self.settings = settings
        self.commands = commands
        self.paths = paths
        self.constants = constants or DEFAULT_CONSTANTS

        self.prerequisites = PrerequisiteChecker(commands, console)
        self.platform_detector = PlatformDetector(
            commands, console, paths, self.constants
        )
        self.namespace_manager = NamespaceManager(commands, console, self.constants)
        self.secret_provisioner = StorageSecretProvisioner(
            commands, console, self.constants
        )
        self.kafka_verifier = KafkaVerifier(
            commands, console, settings, paths, self.constants
        )
        self.keycloak_detector = KeycloakDetector(commands, console, self.constants)
        self.chart_source = ChartSource(
            commands, console, settings, paths, self.constants
        )
        self.helm_release = HelmReleaseManager(commands, console, settings)
        self.readiness = ReadinessPoller(commands, console, settings, self.constants)
        self.status_display = StatusDisplay(commands, console, settings, self.constants)
        self.health_checks = HealthCheckOrchestrator(
            commands, console, settings, self.constants
        )
        self.cleanup_controller = CleanupController(
            commands, console, settings, self.constants
        )

    # =========================================================================
    # Install
    # =========================================================================

    def install(self, extra_args: Sequence[str] = ()) -> InstallOutcome:
        """Run the full install pipeline.

        Args:
            extra_args: Helm value flags forwarded verbatim

        Returns:
            InstallOutcome; health failures do not raise

        Raises:
            DeploymentError: If a fatal phase fails
        """
        self.prerequisites.check()
        run_context = self.platform_detector.build_run_context(self.settings.namespace)

        keycloak: KeycloakReference | None = None
        if run_context.platform is Platform.OPENSHIFT:
            keycloak = self.keycloak_detector.detect()

        self._print_configuration(run_context, keycloak)

        namespace = self.settings.namespace
        self.namespace_manager.ensure(namespace)
        self.secret_provisioner.ensure(
            self.settings.helm_release_name, namespace, run_context.platform
        )
        kafka = self.kafka_verifier.verify()

        with self.chart_source.resolve() as chart:
            self.helm_release.deploy(chart, run_context, kafka, extra_args)

        self.readiness.wait_for_release_pods()
        self.status_display.show(run_context)
        self.readiness.check_ingress(run_context)

        self.console.info("Pod status before health checks:")
        self.status_display.show_pods()
        health = self.health_checks.run(run_context)
        if not health.healthy:
            self.console.warn(
                "Some health checks failed, but the deployment completed successfully"
            )
            self.console.info("Services may need more time to become fully ready")
            self.console.info("Re-run the checks later with: ros-ocp-installer health")

        self._print_completion(run_context)
        logger.debug(f"Install finished with {health.failures} health failure(s)")
        return InstallOutcome(
            run_context=run_context, kafka=kafka, keycloak=keycloak, health=health
        )

    def _print_configuration(
        self, run_context: RunContext, keycloak: KeycloakReference | None
    ) -> None:
        extra = {
            "JWT Authentication": (
                "Enabled" if run_context.jwt_auth_enabled else "Disabled"
            )
        }
        if keycloak is not None and keycloak.found:
            extra["Keycloak Namespace"] = keycloak.namespace
        if run_context.platform_overrides:
            extra["Overrides"] = ", ".join(run_context.platform_overrides)

        self.console.print_subheader("Configuration")
        self.console.print(self.status_display.configuration_table(run_context, extra))

    def _print_completion(self, run_context: RunContext) -> None:
        script = (
            "test-ocp-dataflow.sh"
            if run_context.is_openshift
            else "test-k8s-dataflow.sh"
        )
        self.console.print()
        self.console.ok("ROS-OCP Helm chart installation completed!")
        self.console.info(
            f"The services are now running in namespace '{self.settings.namespace}'"
        )
        self.console.info(
            f"Next: Run {self.constants.TEST_SCRIPT_BASE_URL}/{script} "
            "to test the deployment"
        )

    # =========================================================================
    # Status / Health / Cleanup
    # =========================================================================

    def status(self) -> RunContext:
        """Detect the platform and print the deployment status."""
        run_context = self.platform_detector.build_run_context(
            self.settings.namespace, quiet=True
        )
        self.status_display.show(run_context)
        return run_context

    def health(self) -> HealthReport:
        """Detect the platform and run the health check battery."""
        run_context = self.platform_detector.build_run_context(
            self.settings.namespace, quiet=True
        )
        return self.health_checks.run(run_context)

    def cleanup(self, *, complete: bool = False) -> CleanupReport:
        return self.cleanup_controller.cleanup(complete=complete)
