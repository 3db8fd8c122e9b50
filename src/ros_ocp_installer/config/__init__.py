"""Installer configuration loaded from the environment."""

from .settings import InstallerSettings, load_settings

__all__ = ["InstallerSettings", "load_settings"]
