"""Fake implementation of Shell for testing.

This fake enables testing init actions without spawning processes.
"""

from pathlib import Path

from grove.core.shell import Shell
from grove.core.subprocess import CommandResult


class FakeShell(Shell):
    """In-memory fake implementation of shell command execution.

    Constructor Injection:
    - All state is provided via constructor parameters
    - Only call tracking mutates after construction

    Examples:
        # Every command succeeds
        >>> shell = FakeShell()

        # "npm test" fails with exit code 2
        >>> shell = FakeShell(exit_codes={"npm test": 2})
    """

    def __init__(
        self,
        *,
        exit_codes: dict[str, int] | None = None,
        outputs: dict[str, str] | None = None,
    ) -> None:
        """Initialize fake with predetermined command outcomes.

        Args:
            exit_codes: Mapping of command string -> exit code. Unlisted
                commands exit 0.
            outputs: Mapping of command string -> stdout
        """
        self._exit_codes = exit_codes or {}
        self._outputs = outputs or {}
        self._command_calls: list[tuple[str, Path]] = []

    def run_command(self, command: str, cwd: Path) -> CommandResult:
        """Track the call and return the configured outcome."""
        self._command_calls.append((command, cwd))
        exit_code = self._exit_codes.get(command, 0)
        return CommandResult(
            success=exit_code == 0,
            stdout=self._outputs.get(command, ""),
            stderr="" if exit_code == 0 else f"{command}: failed",
            exit_code=exit_code,
        )

    @property
    def command_calls(self) -> list[tuple[str, Path]]:
        """Get the list of run_command() calls that were made.

        Returns list of (command, cwd) tuples.

        This property is for test assertions only.
        """
        return self._command_calls.copy()
