"""Removal of the ROS-OCP deployment.

Teardown is best-effort: individual deletion failures are reported and the
remaining steps still run. Strimzi, Kafka and Keycloak are never touched.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ros_ocp_installer.utils.console_like import ConsoleLike
from ros_ocp_installer.utils.polling import poll_until

from .constants import DEFAULT_CONSTANTS, InstallerConstants

if TYPE_CHECKING:
    from ros_ocp_installer.config import InstallerSettings

    from ..shell_commands import ShellCommands


@dataclass
class CleanupReport:
    """What a cleanup run did."""

    namespace_found: bool = False
    release_uninstalled: bool = False
    deleted_pvcs: list[str] = field(default_factory=list)
    deleted_pvs: list[str] = field(default_factory=list)
    pvcs_gone: bool = True
    namespace_gone: bool = True


class CleanupController:
    """Uninstalls the release and deletes its storage and namespace."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        settings: InstallerSettings,
        constants: InstallerConstants | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the cleanup controller.

        Args:
            commands: Shell command executor
            console: Console for progress output
            settings: Release name and namespace to remove
            constants: Timeouts and poll intervals
            sleep: Sleep function, replaceable in tests
        """
        self.commands = commands
        self.console = console
        self.settings = settings
        self.constants = constants or DEFAULT_CONSTANTS
        self._sleep = sleep

    def cleanup(self, *, complete: bool = False) -> CleanupReport:
        """Remove the deployment.

        Args:
            complete: Also delete PersistentVolumes still bound to claims
                from the namespace

        Returns:
            CleanupReport describing the actions taken
        """
        namespace = self.settings.namespace
        report = CleanupReport()

        self.console.info("Cleaning up ROS-OCP Helm deployment...")
        self.console.info(
            "Note: Strimzi/Kafka and Keycloak are NOT removed. "
            "Clean them up separately (e.g. ./deploy-strimzi.sh cleanup)."
        )

        if not self.commands.kubectl.namespace_exists(namespace):
            self.console.info(f"Namespace '{namespace}' does not exist")
            return report
        report.namespace_found = True

        report.release_uninstalled = self._uninstall_release()
        self._delete_pvcs(report)
        if complete:
            self._delete_orphaned_pvs(report)
        self._delete_namespace(report)

        self.console.ok("Cleanup completed")
        return report

    # =========================================================================
    # Steps
    # =========================================================================

    def _uninstall_release(self) -> bool:
        release = self.settings.helm_release_name
        namespace = self.settings.namespace
        self.console.info("Deleting Helm release...")

        if not self.commands.helm.release_exists(release, namespace):
            self.console.info(f"Helm release '{release}' not found")
            return False

        result = self.commands.helm.uninstall(release, namespace)
        if not result.success:
            self.console.warn(f"helm uninstall failed: {result.stderr.strip()}")
            return False

        self.console.info("Waiting for Helm release deletion to complete...")
        self._sleep(self.constants.HELM_UNINSTALL_SETTLE_SECONDS)
        return True

    def _delete_pvcs(self, report: CleanupReport) -> None:
        kubectl = self.commands.kubectl
        namespace = self.settings.namespace
        self.console.info("Deleting Persistent Volume Claims...")

        pvcs = kubectl.get_pvcs(namespace)
        if not pvcs:
            self.console.info("No PVCs found in namespace")
            return

        for pvc in pvcs:
            self.console.info(f"Deleting PVC: {pvc}")
            result = kubectl.delete_pvc(pvc, namespace)
            if result.success:
                report.deleted_pvcs.append(pvc)
            else:
                self.console.warn(
                    f"Failed to delete PVC {pvc}: {result.stderr.strip()}"
                )

        self.console.info("Waiting for PVCs to be deleted...")
        timeout = self.constants.PVC_DELETE_TIMEOUT
        poll = poll_until(
            lambda: not kubectl.get_pvcs(namespace),
            interval=self.constants.DELETE_POLL_INTERVAL,
            timeout=timeout,
            on_wait=lambda elapsed: self.console.info(
                f"Waiting for PVCs to be deleted... ({int(elapsed)}/{int(timeout)} "
                "seconds)"
            ),
            sleep=self._sleep,
        )
        report.pvcs_gone = poll.satisfied
        if poll.satisfied:
            self.console.ok("All PVCs deleted")
        else:
            self.console.warn(
                "Timeout waiting for PVCs to be deleted. Some may still exist."
            )

    def _delete_orphaned_pvs(self, report: CleanupReport) -> None:
        kubectl = self.commands.kubectl
        namespace = self.settings.namespace
        self.console.info(
            "Performing complete cleanup including orphaned Persistent Volumes..."
        )

        orphaned = [
            pv.name
            for pv in kubectl.get_persistent_volumes()
            if pv.claim_namespace == namespace
        ]
        if not orphaned:
            self.console.info("No orphaned PVs found")
            return

        for pv in orphaned:
            self.console.info(f"Deleting orphaned PV: {pv}")
            result = kubectl.delete_persistent_volume(pv)
            if result.success:
                report.deleted_pvs.append(pv)
            else:
                self.console.warn(f"Failed to delete PV {pv}: {result.stderr.strip()}")

    def _delete_namespace(self, report: CleanupReport) -> None:
        kubectl = self.commands.kubectl
        namespace = self.settings.namespace
        self.console.info("Deleting namespace...")

        result = kubectl.delete_namespace(namespace)
        if not result.success:
            self.console.warn(
                f"Namespace deletion request failed: {result.stderr.strip()}"
            )

        self.console.info("Waiting for namespace deletion to complete...")
        timeout = self.constants.NAMESPACE_DELETE_TIMEOUT
        poll = poll_until(
            lambda: not kubectl.namespace_exists(namespace),
            interval=self.constants.DELETE_POLL_INTERVAL,
            timeout=timeout,
            on_wait=lambda elapsed: self.console.info(
                f"Waiting for namespace deletion... ({int(elapsed)}/{int(timeout)} "
                "seconds)"
            ),
            sleep=self._sleep,
        )
        report.namespace_gone = poll.satisfied
        if poll.satisfied:
            self.console.ok("Namespace deleted successfully")
        else:
            self.console.warn(
                "Timeout waiting for namespace deletion. It may still be terminating."
            )
