"""Shell command execution for init actions."""

from abc import ABC, abstractmethod
from pathlib import Path

from grove.core.subprocess import CommandResult, run_captured


class Shell(ABC):
    """Abstract interface for running shell command strings."""

    @abstractmethod
    def run_command(self, command: str, cwd: Path) -> CommandResult:
        """Run `command` through bash in `cwd` and capture its output."""
        ...


class RealShell(Shell):
    """Production implementation running `bash -c <command>`."""

    def run_command(self, command: str, cwd: Path) -> CommandResult:
        return run_captured(["bash", "-c", command], f"run {command!r}", cwd=cwd)
