"""
Process launcher interface.

The activation runner depends on this contract rather than on subprocess
directly so tests can substitute scripted launchers.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ..models.unit import LaunchResult


class IProcessLauncher(ABC):
    """Runs a command to completion and captures its output."""

    @abstractmethod
    def run(
        self,
        command: str,
        *,
        user: str | None = None,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> LaunchResult:
        """
        Run a command and wait for it to exit.

        Args:
            command: Command string, split shell-style
            user: Identity to run as (None keeps the current identity)
            cwd: Working directory
            env: Extra environment variables layered over the current environment

        Returns:
            LaunchResult with exit code and captured output

        Raises:
            SpawnError: If the command could not be started
        """
        pass
