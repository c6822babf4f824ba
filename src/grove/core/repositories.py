"""Registered repositories, persisted in repositories.json."""

from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from grove.core.errors import PreconditionError, RepositoryNotFoundError, ValidationError
from grove.core.json_store import load_json_document, save_json_document
from grove.core.types import Repository


def _repository_from_dict(data: dict[str, Any]) -> Repository:
    return Repository(
        path=Path(data["path"]),
        name=data["name"],
        is_monorepo=bool(data.get("isMonorepo", False)),
        registered_at=data.get("registeredAt"),
    )


def _repository_to_dict(repo: Repository) -> dict[str, Any]:
    data: dict[str, Any] = {"path": str(repo.path), "name": repo.name}
    if repo.registered_at is not None:
        data["registeredAt"] = repo.registered_at
    if repo.is_monorepo:
        data["isMonorepo"] = True
    return data


class RepositoryStore:
    """Load/modify/save access to repositories.json."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def list_repositories(self) -> list[Repository]:
        data = load_json_document(self._path, {"repositories": []})
        entries = data.get("repositories", [])
        if not isinstance(entries, list):
            return []
        return [
            _repository_from_dict(entry)
            for entry in entries
            if isinstance(entry, dict) and "path" in entry and "name" in entry
        ]

    def _save(self, repositories: list[Repository]) -> None:
        save_json_document(
            self._path, {"repositories": [_repository_to_dict(r) for r in repositories]}
        )

    def find_by_path(self, path: Path) -> Repository | None:
        for repo in self.list_repositories():
            if repo.path == path:
                return repo
        return None

    def find_by_name(self, name: str) -> Repository | None:
        """First registered repository with this name."""
        for repo in self.list_repositories():
            if repo.name == name:
                return repo
        return None

    def register(self, path: Path, *, is_monorepo: bool = False) -> Repository:
        """Register a git repository.

        Args:
            path: Repository root; must contain a .git entry
            is_monorepo: Whether sub-project selections are allowed

        Returns:
            The newly registered Repository

        Raises:
            ValidationError: If the path is not a git repository
            PreconditionError: If the path is already registered
        """
        resolved = path.expanduser().resolve()
        if not resolved.is_dir():
            raise ValidationError(f"Not a directory: {resolved}")
        if not (resolved / ".git").exists():
            raise ValidationError(f"Not a git repository: {resolved}")

        if self.find_by_path(resolved) is not None:
            raise PreconditionError(f"Repository already registered: {resolved}")

        repo = Repository(
            path=resolved,
            name=resolved.name,
            is_monorepo=is_monorepo,
            registered_at=datetime.now(UTC).isoformat(),
        )
        self._save([*self.list_repositories(), repo])
        return repo

    def set_monorepo(self, path: Path, is_monorepo: bool) -> Repository:
        """Toggle whether a registered repository is treated as a monorepo."""
        repositories = self.list_repositories()
        for index, repo in enumerate(repositories):
            if repo.path == path:
                updated = replace(repo, is_monorepo=is_monorepo)
                repositories[index] = updated
                self._save(repositories)
                return updated
        raise RepositoryNotFoundError(str(path))

    def remove(self, path: Path) -> None:
        """Unregister a repository. Existing groves are not touched."""
        repositories = self.list_repositories()
        remaining = [r for r in repositories if r.path != path]
        if len(remaining) == len(repositories):
            raise RepositoryNotFoundError(str(path))
        self._save(remaining)
