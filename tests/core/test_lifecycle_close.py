"""Tests for closing worktrees and groves."""

from pathlib import Path

import pytest

from grove.core.context import GroveContext
from grove.core.errors import (
    GroveMetadataMissingError,
    GroveNotFoundError,
    WorktreeAlreadyClosedError,
    WorktreeNotFoundError,
)
from grove.core.git.fake import FakeGit
from grove.core.lifecycle import (
    CreateGroveResult,
    close_grove,
    close_worktree,
    create_grove,
    load_grove,
)
from grove.core.naming import normalize_grove_name
from grove.core.types import RepositorySelection
from tests.test_utils.repos import make_repo, register_repo

GROVE_NAME = "Closing Time"


def _grove_with(ctx: GroveContext, tmp_path: Path, *names: str) -> CreateGroveResult:
    selections = [
        RepositorySelection(repository=register_repo(ctx, make_repo(tmp_path / "src", name)))
        for name in names
    ]
    return create_grove(ctx, GROVE_NAME, selections)


def _grove_dir(home: Path) -> Path:
    return home / "grove-worktrees" / normalize_grove_name(GROVE_NAME)


def _worktree_path(grove_dir: Path, repo_name: str) -> Path:
    return grove_dir / f"{repo_name}.worktree"


def test_close_worktree_marks_closed(tmp_path: Path) -> None:
    """A clean removal marks the worktree closed and keeps it in metadata."""
    git = FakeGit()
    ctx = GroveContext.for_test(tmp_path, git=git)
    created = _grove_with(ctx, tmp_path, "api")
    path = _worktree_path(created.grove_dir, "api")

    result = close_worktree(ctx, created.metadata.id, path)

    assert result.success
    assert result.message == "Worktree closed successfully"
    assert not path.exists()
    assert git.removed_worktrees == [(created.metadata.worktrees[0].repository_path, path, True)]

    _, metadata = load_grove(ctx, created.metadata.id)
    worktree = metadata.worktrees[0]
    assert worktree.closed
    assert worktree.closed_at is not None
    assert worktree.last_error is None


def test_close_worktree_twice_is_rejected_without_driver_call(tmp_path: Path) -> None:
    """Closed worktrees are never handed to git again."""
    git = FakeGit()
    ctx = GroveContext.for_test(tmp_path, git=git)
    created = _grove_with(ctx, tmp_path, "api")
    path = _worktree_path(created.grove_dir, "api")
    close_worktree(ctx, created.metadata.id, path)

    with pytest.raises(WorktreeAlreadyClosedError):
        close_worktree(ctx, created.metadata.id, path)

    assert len(git.removed_worktrees) == 1


def test_close_worktree_driver_failure_still_marks_closed(tmp_path: Path) -> None:
    """The close is recorded with the error and the leftover folder is deleted."""
    path = _worktree_path(_grove_dir(tmp_path), "api")
    ctx = GroveContext.for_test(
        tmp_path, git=FakeGit(remove_failures={path: "fatal: worktree is locked"})
    )
    created = _grove_with(ctx, tmp_path, "api")

    result = close_worktree(ctx, created.metadata.id, path)

    assert not result.success
    assert result.message == "Worktree closed with errors"
    assert result.errors == [f"Failed to remove worktree {path}: fatal: worktree is locked"]
    assert not path.exists()

    _, metadata = load_grove(ctx, created.metadata.id)
    worktree = metadata.worktrees[0]
    assert worktree.closed
    assert worktree.last_error == result.errors[0]


def test_close_worktree_unknown_path(tmp_path: Path) -> None:
    ctx = GroveContext.for_test(tmp_path)
    created = _grove_with(ctx, tmp_path, "api")

    with pytest.raises(WorktreeNotFoundError):
        close_worktree(ctx, created.metadata.id, created.grove_dir / "nope.worktree")


def test_close_worktree_unknown_grove(tmp_path: Path) -> None:
    ctx = GroveContext.for_test(tmp_path)
    with pytest.raises(GroveNotFoundError):
        close_worktree(ctx, "missing", tmp_path / "x.worktree")


def test_close_worktree_missing_metadata(tmp_path: Path) -> None:
    """An indexed grove whose grove.json vanished is reported, not guessed at."""
    ctx = GroveContext.for_test(tmp_path)
    created = _grove_with(ctx, tmp_path, "api")
    (created.grove_dir / "grove.json").unlink()

    with pytest.raises(GroveMetadataMissingError):
        close_worktree(ctx, created.metadata.id, _worktree_path(created.grove_dir, "api"))


def test_close_grove_removes_everything(tmp_path: Path) -> None:
    """All worktrees closed cleanly means the folder and index entry go away."""
    git = FakeGit()
    ctx = GroveContext.for_test(tmp_path, git=git)
    created = _grove_with(ctx, tmp_path, "api", "web")

    result = close_grove(ctx, created.metadata.id)

    assert result.success
    assert result.message == "Grove closed successfully"
    assert not created.grove_dir.exists()
    assert ctx.registry.get_grove(created.metadata.id) is None
    assert len(git.removed_worktrees) == 2


def test_close_grove_keeps_grove_when_a_worktree_fails(tmp_path: Path) -> None:
    """A failed removal leaves the grove registered for a retry."""
    web_path = _worktree_path(_grove_dir(tmp_path), "web")
    ctx = GroveContext.for_test(tmp_path, git=FakeGit(remove_failures={web_path: "locked"}))
    created = _grove_with(ctx, tmp_path, "api", "web")

    result = close_grove(ctx, created.metadata.id)

    assert not result.success
    assert result.message == "Grove closed with some errors"
    assert len(result.errors) == 1
    assert created.grove_dir.exists()
    _, metadata = load_grove(ctx, created.metadata.id)
    assert all(wt.closed for wt in metadata.worktrees)


def test_close_grove_skips_already_closed_worktrees(tmp_path: Path) -> None:
    git = FakeGit()
    ctx = GroveContext.for_test(tmp_path, git=git)
    created = _grove_with(ctx, tmp_path, "api", "web")
    close_worktree(ctx, created.metadata.id, _worktree_path(created.grove_dir, "api"))

    result = close_grove(ctx, created.metadata.id)

    assert result.success
    assert [path for _, path, _ in git.removed_worktrees] == [
        _worktree_path(created.grove_dir, "api"),
        _worktree_path(created.grove_dir, "web"),
    ]
