"""Grove registry: per-grove metadata files and the global grove index.

Each grove directory holds a grove.json with its GroveMetadata. The global
groves.json lists a GroveReference per grove so listing does not need to open
every metadata file.

Reads that hit a missing or malformed file degrade (empty index, or None for
metadata) with a logged warning. Writes raise RegistryWriteError.

There is no locking. Concurrent writers race and the last write wins.
"""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from grove.core.errors import PreconditionError
from grove.core.json_store import load_json_document, save_json_document
from grove.core.types import GroveMetadata, GroveReference, InitActionsStatus, Worktree

logger = logging.getLogger(__name__)

GROVE_METADATA_FILENAME = "grove.json"


# ============================================================================
# Serialization
# ============================================================================


def _status_to_dict(status: InitActionsStatus) -> dict[str, Any]:
    data: dict[str, Any] = {
        "executed": status.executed,
        "success": status.success,
        "executedAt": status.executed_at,
        "logFile": str(status.log_file) if status.log_file is not None else None,
        "totalActions": status.total_actions,
        "successfulActions": status.successful_actions,
    }
    if status.error_message is not None:
        data["errorMessage"] = status.error_message
    return data


def _status_from_dict(data: dict[str, Any]) -> InitActionsStatus:
    log_file = data.get("logFile")
    return InitActionsStatus(
        executed=bool(data["executed"]),
        success=bool(data["success"]),
        executed_at=data["executedAt"],
        log_file=Path(log_file) if log_file else None,
        total_actions=int(data["totalActions"]),
        successful_actions=int(data["successfulActions"]),
        error_message=data.get("errorMessage"),
    )


def worktree_to_dict(worktree: Worktree) -> dict[str, Any]:
    """Serialize a worktree. Optional fields are omitted while unset."""
    data: dict[str, Any] = {
        "repositoryName": worktree.repository_name,
        "repositoryPath": str(worktree.repository_path),
        "worktreePath": str(worktree.worktree_path),
        "branch": worktree.branch,
    }
    if worktree.project_path is not None:
        data["projectPath"] = worktree.project_path
    if worktree.name is not None:
        data["name"] = worktree.name
    if worktree.closed:
        data["closed"] = True
        data["closedAt"] = worktree.closed_at
    if worktree.last_error is not None:
        data["lastError"] = worktree.last_error
    if worktree.init_actions_status is not None:
        data["initActionsStatus"] = _status_to_dict(worktree.init_actions_status)
    return data


def worktree_from_dict(data: dict[str, Any]) -> Worktree:
    status = data.get("initActionsStatus")
    return Worktree(
        repository_name=data["repositoryName"],
        repository_path=Path(data["repositoryPath"]),
        worktree_path=Path(data["worktreePath"]),
        branch=data["branch"],
        project_path=data.get("projectPath"),
        name=data.get("name"),
        closed=bool(data.get("closed", False)),
        closed_at=data.get("closedAt"),
        last_error=data.get("lastError"),
        init_actions_status=_status_from_dict(status) if isinstance(status, dict) else None,
    )


def metadata_to_dict(metadata: GroveMetadata) -> dict[str, Any]:
    return {
        "id": metadata.id,
        "name": metadata.name,
        "identifier": metadata.identifier,
        "worktrees": [worktree_to_dict(wt) for wt in metadata.worktrees],
        "createdAt": metadata.created_at,
        "updatedAt": metadata.updated_at,
    }


def metadata_from_dict(data: dict[str, Any]) -> GroveMetadata:
    return GroveMetadata(
        id=data["id"],
        name=data["name"],
        identifier=data.get("identifier", ""),
        worktrees=[worktree_from_dict(wt) for wt in data.get("worktrees", [])],
        created_at=data["createdAt"],
        updated_at=data["updatedAt"],
    )


def _reference_to_dict(ref: GroveReference) -> dict[str, Any]:
    return {
        "id": ref.id,
        "name": ref.name,
        "path": str(ref.path),
        "createdAt": ref.created_at,
        "updatedAt": ref.updated_at,
    }


def _reference_from_dict(data: dict[str, Any]) -> GroveReference:
    return GroveReference(
        id=data["id"],
        name=data["name"],
        path=Path(data["path"]),
        created_at=data["createdAt"],
        updated_at=data["updatedAt"],
    )


# ============================================================================
# Registry
# ============================================================================


class GroveRegistry:
    """Filesystem-backed grove index and metadata store."""

    def __init__(self, index_path: Path) -> None:
        self.index_path = index_path

    def list_groves(self) -> list[GroveReference]:
        """Load the grove index. A malformed index reads as empty."""
        data = load_json_document(self.index_path, {"groves": []})
        entries = data.get("groves", [])
        if not isinstance(entries, list):
            logger.warning(f"Ignoring malformed grove index {self.index_path}")
            return []

        groves: list[GroveReference] = []
        for entry in entries:
            try:
                groves.append(_reference_from_dict(entry))
            except (KeyError, TypeError) as e:
                logger.warning(f"Skipping malformed grove index entry {entry!r}: {e}")
        return groves

    def _save_index(self, groves: list[GroveReference]) -> None:
        save_json_document(self.index_path, {"groves": [_reference_to_dict(g) for g in groves]})

    def get_grove(self, grove_id: str) -> GroveReference | None:
        for grove in self.list_groves():
            if grove.id == grove_id:
                return grove
        return None

    def add_grove(self, reference: GroveReference) -> None:
        """Append a grove to the index.

        Raises:
            PreconditionError: If a grove with the same id is already indexed
        """
        groves = self.list_groves()
        if any(g.id == reference.id for g in groves):
            raise PreconditionError(f"Grove id already registered: {reference.id}")
        self._save_index([*groves, reference])

    def remove_grove(self, grove_id: str) -> None:
        groves = self.list_groves()
        self._save_index([g for g in groves if g.id != grove_id])

    def read_metadata(self, grove_dir: Path) -> GroveMetadata | None:
        """Read grove.json, or None if it is missing or malformed."""
        metadata_path = grove_dir / GROVE_METADATA_FILENAME
        if not metadata_path.exists():
            return None

        data = load_json_document(metadata_path, {})
        try:
            return metadata_from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed grove metadata {metadata_path}: {e}")
            return None

    def write_metadata(self, grove_dir: Path, metadata: GroveMetadata) -> GroveMetadata:
        """Persist metadata, refreshing `updated_at`.

        The matching index entry, if any, gets the same `updated_at` and name.

        Returns:
            The metadata as written

        Raises:
            RegistryWriteError: If grove.json or the index cannot be written
        """
        now = datetime.now(UTC).isoformat()
        written = replace(metadata, updated_at=now)
        save_json_document(grove_dir / GROVE_METADATA_FILENAME, metadata_to_dict(written))

        groves = self.list_groves()
        for index, grove in enumerate(groves):
            if grove.id == written.id:
                groves[index] = replace(grove, name=written.name, updated_at=now)
                self._save_index(groves)
                break

        return written
