"""Recently used repository selections, persisted in recent.json."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from grove.core.json_store import load_json_document, save_json_document
from grove.core.types import RecentSelection, RepositorySelection

MAX_RECENT_SELECTIONS = 3


class RecentSelectionsStore:
    """Most-recent-first list of selections, de-duplicated by repository and project."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def list_selections(self) -> list[RecentSelection]:
        data = load_json_document(self._path, {"selections": []})
        entries = data.get("selections", [])
        if not isinstance(entries, list):
            return []
        return [
            RecentSelection(
                repository_path=Path(entry["repositoryPath"]),
                project_path=entry.get("projectPath"),
                last_used=entry.get("lastUsed", ""),
            )
            for entry in entries
            if isinstance(entry, dict) and "repositoryPath" in entry
        ]

    def record(self, selections: list[RepositorySelection]) -> list[RecentSelection]:
        """Move the given selections to the front of the list and persist it.

        Returns:
            The updated list
        """
        if not selections:
            return self.list_selections()

        now = datetime.now(UTC).isoformat()
        fresh = [
            RecentSelection(
                repository_path=s.repository.path,
                project_path=s.project_path,
                last_used=now,
            )
            for s in selections
        ]

        combined: list[RecentSelection] = []
        seen: set[str] = set()
        for entry in [*fresh, *self.list_selections()]:
            if entry.key in seen:
                continue
            seen.add(entry.key)
            combined.append(entry)

        trimmed = combined[:MAX_RECENT_SELECTIONS]
        save_json_document(self._path, {"selections": [_to_dict(e) for e in trimmed]})
        return trimmed


def _to_dict(entry: RecentSelection) -> dict[str, Any]:
    data: dict[str, Any] = {"repositoryPath": str(entry.repository_path)}
    if entry.project_path is not None:
        data["projectPath"] = entry.project_path
    data["lastUsed"] = entry.last_used
    return data
