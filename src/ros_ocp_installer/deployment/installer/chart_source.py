"""Chart source resolution: a local checkout or the latest GitHub release."""

from __future__ import annotations

import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import requests
from loguru import logger

from ros_ocp_installer.utils.console_like import ConsoleLike

from .constants import DEFAULT_CONSTANTS, InstallerConstants, InstallerPaths
from .errors import ChartDownloadError, DeploymentError

if TYPE_CHECKING:
    from ros_ocp_installer.config import InstallerSettings

    from ..shell_commands import ShellCommands

_FALLBACK_HINT = "Fallback: set USE_LOCAL_CHART=true to deploy from a local chart"


def select_release_asset(
    release: dict[str, Any], marker: str = DEFAULT_CONSTANTS.RELEASE_ASSET_MARKER
) -> dict[str, Any]:
    """Pick the first release asset whose name contains ``marker``.

    Raises:
        ChartDownloadError: If no asset matches; lists the available names
    """
    assets = release.get("assets") or []
    for asset in assets:
        if marker in asset.get("name", ""):
            return asset

    tag = release.get("tag_name", "unknown")
    available = "\n".join(f"  - {a.get('name', '?')}" for a in assets) or "  (none)"
    raise ChartDownloadError(
        f"No chart archive found in the latest release ({tag})",
        f"Available assets:\n{available}\n\n{_FALLBACK_HINT}",
    )


class ChartSource:
    """Provides the chart to deploy for the duration of a ``with`` block."""

    def __init__(
        self,
        commands: ShellCommands,
        console: ConsoleLike,
        settings: InstallerSettings,
        paths: InstallerPaths,
        constants: InstallerConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.settings = settings
        self.paths = paths
        self.constants = constants or DEFAULT_CONSTANTS

    @contextmanager
    def resolve(self) -> Generator[Path]:
        """Yield a path Helm can install from.

        In local mode this is the configured chart directory. Otherwise the
        latest release archive is downloaded into a temporary directory that
        is removed when the block exits, whatever the outcome.

        Raises:
            DeploymentError: If the local chart directory is missing
            ChartDownloadError: If any download step fails
        """
        if self.settings.use_local_chart:
            yield self._local_chart()
            return

        with tempfile.TemporaryDirectory(prefix="ros-ocp-chart-") as temp_dir:
            yield self._download(Path(temp_dir))
        logger.debug("Removed downloaded chart directory")

    def _local_chart(self) -> Path:
        chart = self.paths.local_chart
        if not chart.is_dir():
            raise DeploymentError(
                f"Local chart directory not found: {chart}",
                "Set LOCAL_CHART_PATH to the chart directory, or unset "
                "USE_LOCAL_CHART to download the latest release",
            )
        self.console.info(f"Using local chart: {chart}")
        return chart

    def _download(self, destination_dir: Path) -> Path:
        http = self.commands.http
        self.console.info("Fetching latest release information from GitHub...")
        try:
            release = http.get_json(self.constants.latest_release_url)
        except (requests.RequestException, ValueError) as e:
            raise ChartDownloadError(
                "Failed to fetch release information from GitHub",
                f"{e}\n\n{_FALLBACK_HINT}",
            ) from e

        asset = select_release_asset(release, self.constants.RELEASE_ASSET_MARKER)
        filename = asset["name"]
        url = asset.get("browser_download_url", "")
        self.console.info(f"Latest release: {release.get('tag_name', 'unknown')}")
        self.console.info(f"Downloading: {filename}")

        target = destination_dir / Path(filename).name
        try:
            http.download(url, target)
        except requests.RequestException as e:
            raise ChartDownloadError(
                "Failed to download chart from GitHub",
                f"{url}: {e}\n\n{_FALLBACK_HINT}",
            ) from e

        if not target.is_file():
            raise ChartDownloadError(
                f"Downloaded chart file not found: {target}", _FALLBACK_HINT
            )

        self.console.ok(f"Downloaded chart: {filename} ({target.stat().st_size} bytes)")
        return target
