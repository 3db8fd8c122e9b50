"""Data types for shell command results.

CommandResult is re-exported from ros_ocp_installer.infra.k8s.controller so
that the shell wrappers and the Kubernetes controller share one result type.
"""

from __future__ import annotations

from dataclasses import dataclass

from ros_ocp_installer.infra.k8s.controller import CommandResult

__all__ = [
    "CommandResult",
    "HelmRelease",
    "ProbeResult",
]


@dataclass
class HelmRelease:
    """Information about a Helm release.

    Attributes:
        name: Release name
        namespace: Kubernetes namespace
        status: Release status (deployed, failed, pending-install, ...)
        revision: Release revision number
    """

    name: str
    namespace: str
    status: str
    revision: str


@dataclass
class ProbeResult:
    """Outcome of a single HTTP probe.

    Attributes:
        url: URL that was requested
        ok: True for a 2xx/3xx response
        status_code: HTTP status, or None when no response was received
        error: Transport error message, if any
    """

    url: str
    ok: bool
    status_code: int | None = None
    error: str = ""
