"""Tests for the structured subprocess wrapper."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

from grove.core.subprocess import LAUNCH_FAILURE_EXIT_CODE, run_captured


def test_success_case_returns_structured_result() -> None:
    """Zero exit codes map to success with captured output."""
    with patch("grove.core.subprocess.subprocess.run") as mock_run:
        mock_result = Mock(spec=subprocess.CompletedProcess)
        mock_result.returncode = 0
        mock_result.stdout = "ok\n"
        mock_result.stderr = ""
        mock_run.return_value = mock_result

        result = run_captured(["git", "status"], "check status", cwd=Path("/repo"))

        assert result.success
        assert result.stdout == "ok\n"
        assert result.exit_code == 0
        mock_run.assert_called_once_with(
            ["git", "status"],
            cwd=Path("/repo"),
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )


def test_non_zero_exit_is_a_failure_not_an_exception() -> None:
    """Failures are reported through the result."""
    with patch("grove.core.subprocess.subprocess.run") as mock_run:
        mock_result = Mock(spec=subprocess.CompletedProcess)
        mock_result.returncode = 128
        mock_result.stdout = ""
        mock_result.stderr = "fatal: not a git repository"
        mock_run.return_value = mock_result

        result = run_captured(["git", "status"], "check status")

        assert not result.success
        assert result.exit_code == 128
        assert result.stderr == "fatal: not a git repository"


def test_launch_failure_is_folded_into_result() -> None:
    """A missing binary or working directory becomes exit code 127."""
    with patch("grove.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError("No such file or directory: 'git'")

        result = run_captured(["git", "status"], "check status", cwd=Path("/missing"))

        assert not result.success
        assert result.exit_code == LAUNCH_FAILURE_EXIT_CODE
        assert "Failed to check status" in result.stderr
