"""Exception hierarchy for grove operations.

Core modules raise these; the CLI layer converts any GroveError into a styled
error message and exit code 1.

- ValidationError: malformed input (empty name, unknown repository, project
  selection on a repository that is not a monorepo)
- NotFoundError: grove, metadata, worktree or repository missing
- PreconditionError: operation not allowed in the current state
- DriverError: a git worktree command failed
- RegistryWriteError: persisted state could not be written
"""

from pathlib import Path

from grove.core.subprocess import CommandResult


class GroveError(Exception):
    """Base class for all grove errors."""


class ValidationError(GroveError):
    """Input failed validation."""


class NotFoundError(GroveError):
    """A referenced entity does not exist."""


class GroveNotFoundError(NotFoundError):
    def __init__(self, grove_id: str) -> None:
        super().__init__(f"Grove not found: {grove_id}")
        self.grove_id = grove_id


class GroveMetadataMissingError(NotFoundError):
    def __init__(self, grove_id: str, grove_dir: Path) -> None:
        super().__init__(f"Grove metadata not found for {grove_id} in {grove_dir}")
        self.grove_id = grove_id
        self.grove_dir = grove_dir


class WorktreeNotFoundError(NotFoundError):
    def __init__(self, grove_id: str, worktree_path: Path) -> None:
        super().__init__(f"Worktree not found in grove {grove_id}: {worktree_path}")
        self.grove_id = grove_id
        self.worktree_path = worktree_path


class RepositoryNotFoundError(NotFoundError):
    def __init__(self, reference: str) -> None:
        super().__init__(f"Repository not registered: {reference}")
        self.reference = reference


class PreconditionError(GroveError):
    """The operation is not allowed in the current state."""


class WorktreeAlreadyClosedError(PreconditionError):
    def __init__(self, worktree_path: Path) -> None:
        super().__init__(f"Worktree is already closed: {worktree_path}")
        self.worktree_path = worktree_path


class GroveAlreadyExistsError(PreconditionError):
    def __init__(self, grove_dir: Path) -> None:
        super().__init__(f"Grove directory already exists: {grove_dir}")
        self.grove_dir = grove_dir


class DriverError(GroveError):
    """A worktree driver command returned a failure result."""

    def __init__(self, message: str, result: CommandResult) -> None:
        super().__init__(message)
        self.result = result


class RegistryWriteError(GroveError):
    """Persisted state could not be written."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Failed to write {path}: {cause}")
        self.path = path
        self.cause = cause
