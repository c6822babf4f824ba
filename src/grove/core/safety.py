"""Pre-close safety classification of worktrees.

A worktree is issue-free when it has no uncommitted changes, no unpushed
commits, and its upstream branch is gone (merged and deleted remotely).
Anything else needs the caller to ask for the confirmation phrase before
closing.
"""

from dataclasses import dataclass
from pathlib import Path

from grove.core.git.abc import Git
from grove.core.types import BranchUpstreamStatus, GroveMetadata

CONFIRMATION_PHRASE = "delete"


@dataclass(frozen=True)
class SafetyReport:
    """Result of inspecting one worktree."""

    worktree_path: Path
    has_uncommitted_changes: bool
    has_unpushed_commits: bool
    upstream_status: BranchUpstreamStatus

    @property
    def is_issue_free(self) -> bool:
        return (
            not self.has_uncommitted_changes
            and not self.has_unpushed_commits
            and self.upstream_status == "gone"
        )

    def issues(self) -> list[str]:
        """Human-readable reasons the worktree is not issue-free."""
        found: list[str] = []
        if self.has_uncommitted_changes:
            found.append("uncommitted changes")
        if self.has_unpushed_commits:
            found.append("unpushed commits")
        if self.upstream_status == "active":
            found.append("upstream branch still exists")
        elif self.upstream_status == "none":
            found.append("no upstream branch")
        return found


def check_worktree(git: Git, worktree_path: Path) -> SafetyReport:
    return SafetyReport(
        worktree_path=worktree_path,
        has_uncommitted_changes=git.has_uncommitted_changes(worktree_path),
        has_unpushed_commits=git.has_unpushed_commits(worktree_path),
        upstream_status=git.branch_upstream_status(worktree_path),
    )


def check_grove(git: Git, metadata: GroveMetadata) -> list[SafetyReport]:
    """Inspect every open worktree of a grove, in metadata order."""
    return [check_worktree(git, wt.worktree_path) for wt in metadata.open_worktrees()]


def requires_confirmation_phrase(reports: list[SafetyReport]) -> bool:
    """True if any inspected worktree is not issue-free."""
    return any(not report.is_issue_free for report in reports)
