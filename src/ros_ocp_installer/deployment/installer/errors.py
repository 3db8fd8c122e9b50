"""Installer error types."""

from __future__ import annotations


class DeploymentError(Exception):
    """Fatal installer error.

    Attributes:
        message: One-line description of what failed
        details: Remediation guidance shown below the message
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ChartDownloadError(DeploymentError):
    """The chart release could not be fetched from GitHub."""
