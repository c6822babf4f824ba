"""Run a worktree's init actions and record the outcome.

Actions run sequentially through the shell and stop at the first failure.
Every run writes a log file beside the grove metadata with the output of each
action and a summary. A failing action never aborts worktree creation. The
result is recorded in the returned InitActionsStatus.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from grove.core.log_stream import LogEvent, LogSink
from grove.core.shell import Shell
from grove.core.types import InitActionsStatus

logger = logging.getLogger(__name__)

_RULE = "=" * 60


@dataclass(frozen=True)
class InitAction:
    """A shell command and the directory it runs in."""

    command: str
    cwd: Path


def init_log_path(grove_dir: Path, worktree_name: str) -> Path:
    return grove_dir / f"grove-init-{worktree_name}.log"


def _section(index: int, total: int, action: InitAction, stdout: str, stderr: str, code: int) -> list[str]:
    return [
        "",
        f"--- Action {index}/{total} ---",
        f"Command: {action.command}",
        f"Working directory: {action.cwd}",
        "",
        "STDOUT:",
        stdout.rstrip() or "(empty)",
        "",
        "STDERR:",
        stderr.rstrip() or "(empty)",
        "",
        f"Exit code: {code}",
    ]


def _write_log(log_file: Path, lines: list[str]) -> Path | None:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        log_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not write init action log {log_file}: {e}")
        return None
    return log_file


def execute_init_actions(
    shell: Shell,
    actions: list[InitAction],
    *,
    log_file: Path,
    worktree_name: str,
    sink: LogSink,
) -> InitActionsStatus | None:
    """Run init actions in order, stopping at the first failure.

    Args:
        shell: Shell used to run each command
        actions: Commands with their working directories
        log_file: Where the execution log is written
        worktree_name: Worktree folder name, used to tag events and the log
        sink: Receives progress events

    Returns:
        InitActionsStatus summarizing the run, or None when there is nothing to run
    """
    if not actions:
        return None

    executed_at = datetime.now(UTC).isoformat()
    total = len(actions)
    successful = 0
    error_message: str | None = None

    lines = [
        _RULE,
        f"Grove init actions for {worktree_name}",
        f"Started: {executed_at}",
        f"Total actions: {total}",
        _RULE,
    ]

    for index, action in enumerate(actions, start=1):
        sink.emit(LogEvent(f"[{worktree_name}] Running: {action.command}", source=worktree_name))
        result = shell.run_command(action.command, action.cwd)
        lines.extend(_section(index, total, action, result.stdout, result.stderr, result.exit_code))

        if not result.success:
            error_message = (
                f"Action {index}/{total} ({action.command}) failed with exit code {result.exit_code}"
            )
            sink.emit(
                LogEvent(
                    f"✗ Failed with exit code {result.exit_code}",
                    level="error",
                    source=worktree_name,
                )
            )
            break

        successful += 1
        sink.emit(
            LogEvent("✓ Command completed successfully", level="success", source=worktree_name)
        )

    success = successful == total
    outcome = "SUCCESS" if success else "FAILED"
    lines.extend(
        [
            "",
            _RULE,
            "EXECUTION SUMMARY",
            f"Result: {outcome}",
            f"Completed: {successful}/{total}",
        ]
    )
    if error_message is not None:
        lines.append(f"Error: {error_message}")
    lines.append(_RULE)

    sink.emit(
        LogEvent(
            f"{outcome}: {successful}/{total} actions completed",
            level="success" if success else "error",
            source=worktree_name,
        )
    )

    return InitActionsStatus(
        executed=True,
        success=success,
        executed_at=executed_at,
        log_file=_write_log(log_file, lines),
        total_actions=total,
        successful_actions=successful,
        error_message=error_message,
    )
