"""Stage files from a source repository into a new worktree.

Typical use is carrying over untracked, gitignored files a fresh checkout lacks,
such as `.env` files or local editor settings. Each pattern is matched against
the source directory, hidden files included. Matching files are either copied
or symlinked to the same relative path under the destination.
"""

import glob
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from grove.core.types import FileCopyPattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CopyResult:
    """Outcome of staging files for one pass."""

    success: bool
    copied_files: list[str] = field(default_factory=list)
    linked_files: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def find_matching_files(source_dir: Path, pattern: str) -> list[str]:
    """Relative paths of regular files under `source_dir` matching `pattern`."""
    matches = glob.glob(pattern, root_dir=source_dir, recursive=True, include_hidden=True)
    return sorted(m for m in matches if (source_dir / m).is_file())


def _link_file(source: Path, dest: Path) -> None:
    if dest.is_symlink() or dest.exists():
        dest.unlink()
    os.symlink(source.resolve(), dest)


def copy_files_from_patterns(
    source_dir: Path, dest_dir: Path, patterns: list[FileCopyPattern]
) -> CopyResult:
    """Copy or link every file matching `patterns` from `source_dir` into `dest_dir`.

    Failures are collected per file or per pattern; staging continues with the
    remaining files.

    Args:
        source_dir: Directory patterns are matched against
        dest_dir: Directory receiving the files, created if missing
        patterns: Patterns with their staging mode

    Returns:
        CopyResult listing what was copied, linked, and any errors
    """
    if not patterns:
        return CopyResult(success=True)

    copied: list[str] = []
    linked: list[str] = []
    errors: list[str] = []

    if not source_dir.is_dir():
        return CopyResult(success=False, errors=[f"Source directory not found: {source_dir}"])

    for entry in patterns:
        try:
            matches = find_matching_files(source_dir, entry.pattern)
        except (OSError, ValueError) as e:
            errors.append(f'Pattern "{entry.pattern}": {e}')
            continue

        for relative in matches:
            source = source_dir / relative
            dest = dest_dir / relative
            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                if entry.mode == "link":
                    _link_file(source, dest)
                    linked.append(relative)
                else:
                    shutil.copy2(source, dest)
                    copied.append(relative)
            except OSError as e:
                errors.append(f'Failed to {entry.mode} "{relative}": {e}')

    for error in errors:
        logger.warning(error)

    return CopyResult(
        success=not errors, copied_files=copied, linked_files=linked, errors=errors
    )
