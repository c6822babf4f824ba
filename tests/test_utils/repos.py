"""Helpers for building repository directories on disk for tests.

Repositories are plain directories with an empty `.git` folder, enough for
registration. Git itself is replaced by FakeGit.
"""

import json
from pathlib import Path
from typing import Any

from grove.core.context import GroveContext
from grove.core.types import Repository


def make_repo(
    parent: Path,
    name: str,
    *,
    config: dict[str, Any] | None = None,
    local_config: dict[str, Any] | None = None,
    files: dict[str, str] | None = None,
) -> Path:
    """Create a fake repository directory.

    Args:
        parent: Directory to create the repository in
        name: Repository folder name
        config: Contents of .grove.json, if any
        local_config: Contents of .grove.local.json, if any
        files: Relative path -> content of extra files to create

    Returns:
        Path to the repository root
    """
    repo = parent / name
    (repo / ".git").mkdir(parents=True)
    if config is not None:
        write_config(repo, config)
    if local_config is not None:
        write_config(repo, local_config, local=True)
    for relative, content in (files or {}).items():
        path = repo / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return repo


def write_config(directory: Path, config: dict[str, Any], *, local: bool = False) -> None:
    filename = ".grove.local.json" if local else ".grove.json"
    directory.mkdir(parents=True, exist_ok=True)
    (directory / filename).write_text(json.dumps(config), encoding="utf-8")


def register_repo(ctx: GroveContext, path: Path, *, is_monorepo: bool = False) -> Repository:
    return ctx.repositories.register(path, is_monorepo=is_monorepo)
