"""Subprocess execution returning structured results.

Worktree driver and init-action callers need to classify failures and
continue, so commands here never raise on a non-zero exit. Failures to launch
the process at all (missing binary, missing working directory) are folded into
the result with exit code 127.
"""

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

LAUNCH_FAILURE_EXIT_CODE = 127


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    success: bool
    stdout: str
    stderr: str
    exit_code: int


def run_captured(cmd: Sequence[str], operation_context: str, cwd: Path | None = None) -> CommandResult:
    """Run a command, capturing output, and describe the outcome.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description used in debug logging
        cwd: Working directory for command execution

    Returns:
        CommandResult with success, stdout, stderr and exit code
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    logger.debug(f"{operation_context}: {cmd_str} (cwd={cwd})")
    try:
        result = subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )
    except OSError as e:
        logger.debug(f"Failed to launch {cmd_str}: {e}")
        return CommandResult(
            success=False,
            stdout="",
            stderr=f"Failed to {operation_context}: {e}",
            exit_code=LAUNCH_FAILURE_EXIT_CODE,
        )

    return CommandResult(
        success=result.returncode == 0,
        stdout=result.stdout,
        stderr=result.stderr,
        exit_code=result.returncode,
    )
