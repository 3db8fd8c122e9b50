"""Resource names derived from the Helm release name.

These mirror the chart's ``fullname`` template so that the installer looks
for the same object names the chart creates.
"""

from __future__ import annotations

from .constants import DEFAULT_CONSTANTS


def chart_fullname(
    release_name: str, chart_name: str = DEFAULT_CONSTANTS.CHART_NAME
) -> str:
    """Return the chart fullname for a release.

    Examples:
        >>> chart_fullname("ros-ocp-test")
        'ros-ocp-test'
        >>> chart_fullname("prod")
        'prod-ros-ocp'
    """
    if chart_name in release_name:
        return release_name
    return f"{release_name}-{chart_name}"


def storage_secret_name(release_name: str) -> str:
    """Name of the object storage credentials secret the chart consumes."""
    return chart_fullname(release_name) + DEFAULT_CONSTANTS.STORAGE_SECRET_SUFFIX


def service_name(release_name: str, component: str) -> str:
    """Name of a chart-managed service, e.g. ``ros-ocp-ingress``."""
    return f"{chart_fullname(release_name)}-{component}"


def instance_selector(release_name: str) -> str:
    """Label selector matching every pod of the release."""
    return f"{DEFAULT_CONSTANTS.INSTANCE_LABEL_KEY}={release_name}"
