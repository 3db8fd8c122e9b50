"""Command implementations registered on the main Typer app."""

from .cleanup import cleanup
from .health import health
from .install import install
from .status import status

__all__ = ["install", "cleanup", "status", "health"]
