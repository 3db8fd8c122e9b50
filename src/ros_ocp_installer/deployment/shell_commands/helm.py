"""Helm command abstractions.

This module provides commands for Helm release management,
including deployment, uninstallation, and status queries.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult, HelmRelease

if TYPE_CHECKING:
    from .runner import CommandRunner


class HelmCommands:
    """Helm-related shell commands.

    Provides operations for:
    - Release management (upgrade --install, uninstall)
    - Status queries (list releases)
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Helm commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    # =========================================================================
    # Release Management
    # =========================================================================

    @staticmethod
    def build_upgrade_install_command(
        release_name: str,
        chart: Path | str,
        namespace: str,
        *,
        timeout: str,
        values_file: Path | None = None,
        set_values: Sequence[str] = (),
        extra_args: Sequence[str] = (),
    ) -> list[str]:
        """Build the ``helm upgrade --install`` argument list.

        Args:
            release_name: Name for the Helm release
            chart: Chart directory or packaged chart archive
            namespace: Target namespace (created if absent)
            timeout: Helm ``--timeout`` value, e.g. "600s"
            values_file: Optional values file passed with ``-f``
            set_values: ``key=value`` pairs, each passed with ``--set``
            extra_args: Arguments appended verbatim after everything else

        Returns:
            Argument list suitable for CommandRunner
        """
        cmd = [
            "helm",
            "upgrade",
            "--install",
            release_name,
            str(chart),
            "--namespace",
            namespace,
            "--create-namespace",
            "--timeout",
            timeout,
            "--wait",
        ]
        if values_file is not None:
            cmd.extend(["-f", str(values_file)])
        for value in set_values:
            cmd.extend(["--set", value])
        cmd.extend(extra_args)
        return cmd

    def run_command(
        self,
        cmd: Sequence[str],
        *,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Execute a prebuilt helm argument list.

        Output is streamed line by line when ``on_output`` is given,
        otherwise captured.
        """
        if on_output:
            return self._runner.run_streaming(list(cmd), on_output=on_output)
        return self._runner.run(list(cmd), capture_output=True)

    def uninstall(self, release_name: str, namespace: str) -> CommandResult:
        """Uninstall a Helm release.

        Args:
            release_name: Name of the release to uninstall
            namespace: Kubernetes namespace

        Returns:
            CommandResult with uninstall status
        """
        return self._runner.run(["helm", "uninstall", release_name, "-n", namespace])

    # =========================================================================
    # Status Queries
    # =========================================================================

    def list_releases(self, namespace: str) -> list[HelmRelease]:
        """List Helm releases in a namespace.

        Args:
            namespace: Kubernetes namespace

        Returns:
            List of releases, empty if the query fails
        """
        result = self._runner.run(
            ["helm", "list", "-n", namespace, "--all", "-o", "json"]
        )
        if not result.success or not result.stdout.strip():
            return []

        try:
            releases = json.loads(result.stdout)
        except json.JSONDecodeError:
            return []

        return [
            HelmRelease(
                name=r.get("name", ""),
                namespace=r.get("namespace", namespace),
                status=r.get("status", ""),
                revision=str(r.get("revision", "")),
            )
            for r in releases
        ]

    def release_exists(self, release_name: str, namespace: str) -> bool:
        """Check whether a named release is present in a namespace."""
        return any(r.name == release_name for r in self.list_releases(namespace))
