"""Local host inspection commands."""

from __future__ import annotations

import platform
import shutil
from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class HostCommands:
    """Commands that inspect the machine the installer runs on.

    Provides operations for:
    - Tool availability on PATH
    - Operating system detection
    - Listening socket lookup
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize host commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def tool_available(self, tool: str) -> bool:
        """Check whether an executable is on PATH."""
        return shutil.which(tool) is not None

    def is_macos(self) -> bool:
        return platform.system() == "Darwin"

    def listening_sockets(self, port: int) -> CommandResult:
        """Find listening TCP sockets bound to ``port``.

        Tries ``ss`` first and falls back to ``netstat``.

        Returns:
            CommandResult whose stdout holds the matching socket lines;
            ``success`` is False when no tool is available or nothing listens
        """
        for tool in ("ss", "netstat"):
            if not self.tool_available(tool):
                continue
            result = self._runner.run([tool, "-tln"], timeout=15)
            if not result.success:
                continue
            matches = [
                line for line in result.stdout.splitlines() if f":{port} " in line
            ]
            return CommandResult(
                success=bool(matches),
                stdout="\n".join(matches),
                returncode=0 if matches else 1,
            )
        return CommandResult(
            success=False, stderr="neither ss nor netstat is available", returncode=127
        )
