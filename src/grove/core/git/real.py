"""Production Git implementation using subprocess."""

from pathlib import Path

from grove.core.git.abc import Git
from grove.core.subprocess import CommandResult, run_captured
from grove.core.types import BranchUpstreamStatus


def _parse_count(output: str) -> int | None:
    stripped = output.strip()
    if not stripped.isdigit():
        return None
    return int(stripped)


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str | None = None,
        commitish: str | None = None,
    ) -> CommandResult:
        """Add a new git worktree, creating `branch` when given."""
        cmd = ["git", "worktree", "add"]
        if branch:
            cmd.extend(["-b", branch])
        cmd.append(str(path))
        if commitish:
            cmd.append(commitish)
        return run_captured(cmd, f"add worktree at {path}", cwd=repo_root)

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> CommandResult:
        """Remove a worktree and prune stale administrative files."""
        cmd = ["git", "worktree", "remove"]
        if force:
            cmd.append("--force")
        cmd.append(str(path))
        result = run_captured(cmd, f"remove worktree at {path}", cwd=repo_root)

        if result.success:
            run_captured(["git", "worktree", "prune"], "prune worktree metadata", cwd=repo_root)

        return result

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check if a worktree has uncommitted changes."""
        result = run_captured(["git", "status", "--porcelain"], "check status", cwd=cwd)
        if not result.success:
            return False
        return bool(result.stdout.strip())

    def has_unpushed_commits(self, cwd: Path) -> bool:
        """Check for commits ahead of the upstream.

        When the configured upstream was deleted remotely, commits are compared
        against every remote-tracking ref instead.
        """
        upstream = run_captured(
            ["git", "rev-parse", "--abbrev-ref", "@{upstream}"], "resolve upstream", cwd=cwd
        )
        if upstream.success and upstream.stdout.strip():
            ahead = run_captured(
                ["git", "rev-list", "--count", f"{upstream.stdout.strip()}..HEAD"],
                "count unpushed commits",
                cwd=cwd,
            )
        elif self.branch_upstream_status(cwd) == "gone":
            ahead = run_captured(
                ["git", "rev-list", "--count", "HEAD", "--not", "--remotes"],
                "count commits missing from remotes",
                cwd=cwd,
            )
        else:
            return True

        if not ahead.success:
            return True
        count = _parse_count(ahead.stdout)
        if count is None:
            return True
        return count > 0

    def branch_upstream_status(self, cwd: Path) -> BranchUpstreamStatus:
        """Classify the upstream of the currently checked-out branch."""
        branch = self.current_branch(cwd)
        if branch is None:
            return "none"

        merge_ref = run_captured(
            ["git", "config", "--get", f"branch.{branch}.merge"], "read upstream config", cwd=cwd
        )
        if not merge_ref.success or not merge_ref.stdout.strip():
            return "none"

        track = run_captured(
            ["git", "for-each-ref", "--format=%(upstream:track)", f"refs/heads/{branch}"],
            "read upstream tracking state",
            cwd=cwd,
        )
        if track.success and "[gone]" in track.stdout:
            return "gone"
        return "active"

    def current_branch(self, cwd: Path) -> str | None:
        result = run_captured(
            ["git", "symbolic-ref", "--quiet", "--short", "HEAD"], "get current branch", cwd=cwd
        )
        if not result.success or not result.stdout.strip():
            return None
        return result.stdout.strip()

    def detect_main_branch(self, repo_root: Path) -> str:
        """Detect the main branch from origin/HEAD, then main or master, then HEAD."""
        origin_head = run_captured(
            ["git", "symbolic-ref", "--quiet", "--short", "refs/remotes/origin/HEAD"],
            "read origin HEAD",
            cwd=repo_root,
        )
        if origin_head.success and origin_head.stdout.strip():
            return origin_head.stdout.strip().removeprefix("origin/")

        for candidate in ("main", "master"):
            if self.ref_exists(repo_root, f"refs/heads/{candidate}"):
                return candidate

        return self.current_branch(repo_root) or "main"

    def ref_exists(self, cwd: Path, ref: str) -> bool:
        result = run_captured(
            ["git", "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"],
            f"verify {ref}",
            cwd=cwd,
        )
        return result.success

    def fetch(self, cwd: Path) -> CommandResult:
        return run_captured(["git", "fetch", "--prune"], "fetch from remote", cwd=cwd)

    def pull(self, cwd: Path) -> CommandResult:
        return run_captured(["git", "pull", "--ff-only"], "pull from upstream", cwd=cwd)
