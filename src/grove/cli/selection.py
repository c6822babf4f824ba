"""Resolve CLI arguments to registered repositories and grove worktrees."""

from pathlib import Path

from grove.core.context import GroveContext
from grove.core.errors import RepositoryNotFoundError, ValidationError
from grove.core.types import GroveMetadata, RepositorySelection


def parse_repo_argument(ctx: GroveContext, value: str) -> RepositorySelection:
    """Turn `name` or `name.project` into a RepositorySelection.

    A registered repository whose full name matches wins over splitting on
    the first dot, so repositories with dots in their names still resolve.

    Raises:
        RepositoryNotFoundError: If no registered repository matches
        ValidationError: If a project is selected in a repository that is not a monorepo
    """
    exact = ctx.repositories.find_by_name(value)
    if exact is not None:
        return RepositorySelection(repository=exact)

    name, _, project = value.partition(".")
    repository = ctx.repositories.find_by_name(name)
    if repository is None:
        raise RepositoryNotFoundError(name)

    if not project:
        return RepositorySelection(repository=repository)

    if not repository.is_monorepo:
        raise ValidationError(
            f"Repository {name} is not a monorepo, cannot select project {project!r}"
        )
    return RepositorySelection(repository=repository, project_path=project)


def find_worktree_path(metadata: GroveMetadata, value: str) -> Path | None:
    """Match a worktree by its stored path, absolute path, or folder name."""
    candidate = Path(value).expanduser()
    for wt in metadata.worktrees:
        if wt.worktree_path == candidate:
            return wt.worktree_path
    absolute = candidate.absolute()
    for wt in metadata.worktrees:
        if wt.worktree_path == absolute or wt.worktree_path.resolve() == absolute.resolve():
            return wt.worktree_path
    for wt in metadata.worktrees:
        if wt.worktree_path.name == value:
            return wt.worktree_path
    return None
