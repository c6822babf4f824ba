"""Type definitions for groves, worktrees and repository configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

CopyMode = Literal["copy", "link"]
BranchUpstreamStatus = Literal["active", "gone", "none"]


@dataclass(frozen=True)
class Repository:
    """A registered repository. Identity is its path."""

    path: Path
    name: str
    is_monorepo: bool = False
    registered_at: str | None = None


@dataclass(frozen=True)
class RepositorySelection:
    """A repository, optionally narrowed to a sub-project folder, chosen for a grove."""

    repository: Repository
    project_path: str | None = None


@dataclass(frozen=True)
class FileCopyPattern:
    """A glob pattern and how matching files are staged into a worktree."""

    pattern: str
    mode: CopyMode = "copy"


@dataclass(frozen=True)
class IDECommand:
    """A literal IDE launch command."""

    command: str
    args: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GroveRepoConfig:
    """Configuration declared in one directory's .grove.json / .grove.local.json.

    Every field is optional. None means the field was not declared, which is
    distinct from an empty list.
    """

    branch_name_template: str | None = None
    file_copy_patterns: list[FileCopyPattern] | None = None
    init_actions: list[str] | None = None
    ide: str | IDECommand | None = None
    claude_session_templates: dict[str, str] | None = None


@dataclass(frozen=True)
class MergedGroveConfig:
    """Effective configuration for one repository selection.

    Root and project copy patterns and init actions stay separate because they
    are applied in two passes with different source and target directories.
    """

    branch_name_template: str | None
    root_file_copy_patterns: list[FileCopyPattern]
    project_file_copy_patterns: list[FileCopyPattern]
    root_init_actions: list[str]
    project_init_actions: list[str]
    ide: str | IDECommand | None
    claude_session_templates: dict[str, str] | None


@dataclass(frozen=True)
class InitActionsStatus:
    """Summary of the init actions run for one worktree."""

    executed: bool
    success: bool
    executed_at: str
    log_file: Path | None
    total_actions: int
    successful_actions: int
    error_message: str | None = None


@dataclass(frozen=True)
class Worktree:
    """One worktree belonging to a grove.

    `closed` is terminal: once set it is never cleared, and the worktree is never
    handed to the worktree driver again.
    """

    repository_name: str
    repository_path: Path
    worktree_path: Path
    branch: str
    project_path: str | None = None
    name: str | None = None
    closed: bool = False
    closed_at: str | None = None
    last_error: str | None = None
    init_actions_status: InitActionsStatus | None = None


@dataclass(frozen=True)
class GroveMetadata:
    """Contents of <groveDir>/grove.json."""

    id: str
    name: str
    identifier: str
    worktrees: list[Worktree]
    created_at: str
    updated_at: str

    def open_worktrees(self) -> list[Worktree]:
        """Worktrees that have not been closed."""
        return [wt for wt in self.worktrees if not wt.closed]

    def find_worktree(self, worktree_path: Path) -> Worktree | None:
        for wt in self.worktrees:
            if wt.worktree_path == worktree_path:
                return wt
        return None


@dataclass(frozen=True)
class GroveReference:
    """Entry in the global grove index (groves.json)."""

    id: str
    name: str
    path: Path
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class RecentSelection:
    """A recently used repository selection."""

    repository_path: Path
    project_path: str | None
    last_used: str

    @property
    def key(self) -> str:
        return f"{self.repository_path}::{self.project_path or ''}"
