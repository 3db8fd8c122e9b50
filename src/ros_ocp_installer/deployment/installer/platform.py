"""Platform detection and the per-run context derived from it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ros_ocp_installer.utils.console_like import ConsoleLike

from .constants import DEFAULT_CONSTANTS, InstallerConstants, InstallerPaths

if TYPE_CHECKING:
    from ..shell_commands import ShellCommands


class Platform(StrEnum):
    """Target cluster flavour."""

    KUBERNETES = "kubernetes"
    OPENSHIFT = "openshift"


@dataclass(frozen=True)
class RunContext:
    """Immutable facts about the cluster, decided once per run.

    Attributes:
        platform: Detected platform
        values_file: Values file passed to Helm, if any
        platform_overrides: ``key=value`` pairs Helm receives with ``--set``
        jwt_auth_enabled: Whether the chart enables JWT authentication
    """

    platform: Platform
    values_file: Path | None = None
    platform_overrides: tuple[str, ...] = field(default_factory=tuple)
    jwt_auth_enabled: bool = False

    @property
    def is_openshift(self) -> bool:
        return self.platform is Platform.OPENSHIFT


class PlatformDetector:
    """Identifies the platform and resolves platform-dependent configuration."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        paths: InstallerPaths,
        constants: InstallerConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.paths = paths
        self.constants = constants or DEFAULT_CONSTANTS

    def detect(self, namespace: str) -> Platform:
        """Return OPENSHIFT when the Route API answers, KUBERNETES otherwise."""
        self.console.info("Detecting platform...")
        if self.commands.kubectl.routes_api_available(namespace):
            self.console.ok("Detected OpenShift platform")
            return Platform.OPENSHIFT
        self.console.ok("Detected Kubernetes platform")
        return Platform.KUBERNETES

    def build_run_context(self, namespace: str, *, quiet: bool = False) -> RunContext:
        """Detect the platform and derive the values file and overrides.

        Args:
            namespace: Namespace used for the Route API query
            quiet: Skip the values-file and JWT notices that only matter when
                installing
        """
        platform = self.detect(namespace)
        values_file = self.paths.values_file
        overrides: tuple[str, ...] = ()

        if platform is Platform.OPENSHIFT and values_file is None:
            openshift_values = self.paths.openshift_values_file
            if openshift_values.is_file():
                if not quiet:
                    self.console.info(
                        f"Using OpenShift values file: {openshift_values}"
                    )
                values_file = openshift_values
            else:
                if not quiet:
                    self.console.warn(
                        "No OpenShift values file found, "
                        "applying minimal OpenShift overrides"
                    )
                overrides = self.constants.OPENSHIFT_FALLBACK_OVERRIDES

        jwt_enabled = platform is Platform.OPENSHIFT
        if not quiet:
            self.console.info(
                "JWT authentication will be enabled (OpenShift)"
                if jwt_enabled
                else "JWT authentication disabled (Kubernetes)"
            )

        logger.debug(
            f"Run context: platform={platform} values_file={values_file} "
            f"overrides={overrides}"
        )
        return RunContext(
            platform=platform,
            values_file=values_file,
            platform_overrides=overrides,
            jwt_auth_enabled=jwt_enabled,
        )
