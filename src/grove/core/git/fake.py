"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

import shutil
from pathlib import Path

from grove.core.git.abc import Git
from grove.core.subprocess import CommandResult
from grove.core.types import BranchUpstreamStatus


class FakeGit(Git):
    """In-memory fake implementation of git worktree operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults.

    Successful adds create the worktree directory on disk so file staging and
    init actions have somewhere to run. Successful removes delete it, the way
    `git worktree remove --force` does.
    """

    def __init__(
        self,
        *,
        add_failures: dict[Path, str] | None = None,
        remove_failures: dict[Path, str] | None = None,
        uncommitted: set[Path] | None = None,
        unpushed: set[Path] | None = None,
        upstream_statuses: dict[Path, BranchUpstreamStatus] | None = None,
        main_branches: dict[Path, str] | None = None,
        current_branches: dict[Path, str | None] | None = None,
        missing_refs: set[tuple[Path, str]] | None = None,
        fetch_failures: dict[Path, str] | None = None,
        pull_failures: dict[Path, str] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            add_failures: Mapping of repo root -> stderr for add_worktree failures
            remove_failures: Mapping of worktree path -> stderr for remove_worktree failures
            uncommitted: Paths reporting uncommitted changes
            unpushed: Paths reporting unpushed commits
            upstream_statuses: Mapping of path -> upstream status (default "none")
            main_branches: Mapping of repo root -> main branch (default "main")
            current_branches: Mapping of path -> checked-out branch, None for a
                detached HEAD (default: the main branch)
            missing_refs: (path, ref) pairs that do not resolve; every other ref does
            fetch_failures: Mapping of path -> stderr for fetch failures
            pull_failures: Mapping of path -> stderr for pull failures
        """
        self._add_failures = add_failures or {}
        self._remove_failures = remove_failures or {}
        self._uncommitted = uncommitted or set()
        self._unpushed = unpushed or set()
        self._upstream_statuses = upstream_statuses or {}
        self._main_branches = main_branches or {}
        self._current_branches = current_branches or {}
        self._missing_refs = missing_refs or set()
        self._fetch_failures = fetch_failures or {}
        self._pull_failures = pull_failures or {}
        self._added_worktrees: list[tuple[Path, Path, str | None, str | None]] = []
        self._removed_worktrees: list[tuple[Path, Path, bool]] = []
        self._fetched: list[Path] = []
        self._pulled: list[Path] = []

    @property
    def added_worktrees(self) -> list[tuple[Path, Path, str | None, str | None]]:
        """Read-only access to add_worktree() calls for test assertions.

        Returns list of (repo_root, path, branch, commitish) tuples, failures included.
        """
        return self._added_worktrees.copy()

    @property
    def removed_worktrees(self) -> list[tuple[Path, Path, bool]]:
        """Read-only access to remove_worktree() calls for test assertions.

        Returns list of (repo_root, path, force) tuples, failures included.
        """
        return self._removed_worktrees.copy()

    @property
    def fetched(self) -> list[Path]:
        """Paths fetch() was called in, failures included."""
        return self._fetched.copy()

    @property
    def pulled(self) -> list[Path]:
        """Paths pull() was called in, failures included."""
        return self._pulled.copy()

    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str | None = None,
        commitish: str | None = None,
    ) -> CommandResult:
        self._added_worktrees.append((repo_root, path, branch, commitish))
        if repo_root in self._add_failures:
            return CommandResult(
                success=False, stdout="", stderr=self._add_failures[repo_root], exit_code=128
            )
        path.mkdir(parents=True, exist_ok=True)
        return CommandResult(
            success=True, stdout=f"Preparing worktree at {path}\n", stderr="", exit_code=0
        )

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> CommandResult:
        self._removed_worktrees.append((repo_root, path, force))
        if path in self._remove_failures:
            return CommandResult(
                success=False, stdout="", stderr=self._remove_failures[path], exit_code=128
            )
        if path.exists():
            shutil.rmtree(path)
        return CommandResult(success=True, stdout="", stderr="", exit_code=0)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        return cwd in self._uncommitted

    def has_unpushed_commits(self, cwd: Path) -> bool:
        return cwd in self._unpushed

    def branch_upstream_status(self, cwd: Path) -> BranchUpstreamStatus:
        return self._upstream_statuses.get(cwd, "none")

    def current_branch(self, cwd: Path) -> str | None:
        if cwd in self._current_branches:
            return self._current_branches[cwd]
        return self.detect_main_branch(cwd)

    def detect_main_branch(self, repo_root: Path) -> str:
        return self._main_branches.get(repo_root, "main")

    def ref_exists(self, cwd: Path, ref: str) -> bool:
        return (cwd, ref) not in self._missing_refs

    def fetch(self, cwd: Path) -> CommandResult:
        self._fetched.append(cwd)
        if cwd in self._fetch_failures:
            return CommandResult(
                success=False, stdout="", stderr=self._fetch_failures[cwd], exit_code=1
            )
        return CommandResult(success=True, stdout="", stderr="", exit_code=0)

    def pull(self, cwd: Path) -> CommandResult:
        self._pulled.append(cwd)
        if cwd in self._pull_failures:
            return CommandResult(
                success=False, stdout="", stderr=self._pull_failures[cwd], exit_code=1
            )
        return CommandResult(success=True, stdout="", stderr="", exit_code=0)
