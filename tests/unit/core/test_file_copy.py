"""Tests for staging files into worktrees."""

from pathlib import Path

from grove.core.file_copy import copy_files_from_patterns, find_matching_files
from grove.core.types import FileCopyPattern


def _populate(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def test_find_matching_files_includes_hidden_files(tmp_path: Path) -> None:
    """Dotfiles match and directories are skipped."""
    _populate(tmp_path, {".env": "A=1", "config/.env.local": "B=2", "README.md": "x"})
    (tmp_path / "empty.d").mkdir()

    assert find_matching_files(tmp_path, "**/.env*") == [".env", "config/.env.local"]
    assert find_matching_files(tmp_path, "*.d") == []


def test_copy_preserves_relative_paths(tmp_path: Path) -> None:
    """Matched files land at the same relative path in the destination."""
    source = tmp_path / "repo"
    dest = tmp_path / "worktree"
    _populate(source, {".env": "A=1", "config/local.json": "{}"})

    result = copy_files_from_patterns(
        source, dest, [FileCopyPattern(".env"), FileCopyPattern("config/*.json")]
    )

    assert result.success
    assert result.copied_files == [".env", "config/local.json"]
    assert (dest / ".env").read_text(encoding="utf-8") == "A=1"
    assert (dest / "config" / "local.json").exists()


def test_link_mode_creates_symlinks(tmp_path: Path) -> None:
    """Link entries create symlinks to the source file."""
    source = tmp_path / "repo"
    dest = tmp_path / "worktree"
    _populate(source, {"secrets/key.pem": "KEY"})

    result = copy_files_from_patterns(
        source, dest, [FileCopyPattern("secrets/*.pem", mode="link")]
    )

    linked = dest / "secrets" / "key.pem"
    assert result.linked_files == ["secrets/key.pem"]
    assert result.copied_files == []
    assert linked.is_symlink()
    assert linked.resolve() == (source / "secrets" / "key.pem").resolve()


def test_no_patterns_is_a_successful_no_op(tmp_path: Path) -> None:
    """An empty pattern list copies nothing and succeeds."""
    result = copy_files_from_patterns(tmp_path / "missing", tmp_path / "dest", [])
    assert result.success
    assert result.copied_files == []


def test_missing_source_directory_is_reported(tmp_path: Path) -> None:
    """A missing source directory is an error, not an exception."""
    result = copy_files_from_patterns(
        tmp_path / "missing", tmp_path / "dest", [FileCopyPattern(".env")]
    )
    assert not result.success
    assert "Source directory not found" in result.errors[0]


def test_unmatched_pattern_is_not_an_error(tmp_path: Path) -> None:
    """Patterns that match nothing are simply skipped."""
    source = tmp_path / "repo"
    source.mkdir()
    result = copy_files_from_patterns(source, tmp_path / "dest", [FileCopyPattern("*.nothing")])
    assert result.success
    assert result.copied_files == []
