"""Git worktree driver interface.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests

Worktree mutations return a CommandResult instead of raising, so callers can
record a failure and carry on with sibling worktrees.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from grove.core.subprocess import CommandResult
from grove.core.types import BranchUpstreamStatus


class Git(ABC):
    """Abstract interface for git worktree operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str | None = None,
        commitish: str | None = None,
    ) -> CommandResult:
        """Add a worktree at `path`.

        Args:
            repo_root: Repository the worktree belongs to
            path: Location of the new worktree
            branch: New branch to create and check out, if any
            commitish: Starting point; defaults to HEAD of the repository
        """
        ...

    @abstractmethod
    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> CommandResult:
        """Remove the worktree at `path`."""
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check for modified, staged or untracked files."""
        ...

    @abstractmethod
    def has_unpushed_commits(self, cwd: Path) -> bool:
        """Check for commits not present upstream.

        A branch without a configured upstream counts as unpushed.
        """
        ...

    @abstractmethod
    def branch_upstream_status(self, cwd: Path) -> BranchUpstreamStatus:
        """Classify the current branch's upstream.

        Returns:
            "active" if the upstream ref exists, "gone" if it was configured but
            deleted on the remote, "none" if no upstream was ever configured
        """
        ...

    @abstractmethod
    def current_branch(self, cwd: Path) -> str | None:
        """Name of the checked-out branch, or None for a detached HEAD."""
        ...

    @abstractmethod
    def detect_main_branch(self, repo_root: Path) -> str:
        """Guess the repository's main branch.

        Prefers the branch origin/HEAD points at, then a local "main" or
        "master", then whatever is checked out.
        """
        ...

    @abstractmethod
    def ref_exists(self, cwd: Path, ref: str) -> bool:
        """Check whether `ref` resolves to a commit."""
        ...

    @abstractmethod
    def fetch(self, cwd: Path) -> CommandResult:
        """Fetch from the default remote."""
        ...

    @abstractmethod
    def pull(self, cwd: Path) -> CommandResult:
        """Fast-forward the checked-out branch from its upstream."""
        ...
