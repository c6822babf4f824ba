"""Grove lifecycle: create groves, add worktrees, close worktrees and groves.

Every operation runs sequentially in selection/metadata order. Creation never
rolls back: a selection whose worktree cannot be added is reported and skipped,
and the grove keeps whatever did succeed. Closing always records the close,
even when the driver fails to remove the worktree, and reports the failure.
"""

import logging
import secrets
import shutil
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from pathlib import Path

from grove.core.context import GroveContext
from grove.core.context_file import write_context_file
from grove.core.errors import (
    DriverError,
    GroveAlreadyExistsError,
    GroveMetadataMissingError,
    GroveNotFoundError,
    ValidationError,
    WorktreeAlreadyClosedError,
    WorktreeNotFoundError,
)
from grove.core.file_copy import copy_files_from_patterns
from grove.core.init_actions import InitAction, execute_init_actions, init_log_path
from grove.core.log_stream import LogEvent, LogSink, NullLogSink
from grove.core.naming import generate_identifier, normalize_grove_name, project_slug
from grove.core.repo_config import resolve_branch_name, resolve_merged
from grove.core.types import (
    GroveMetadata,
    GroveReference,
    RepositorySelection,
    Worktree,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateGroveResult:
    """Outcome of create_grove.

    `metadata.worktrees` holds exactly the selections whose worktree was added;
    `errors` holds one message per selection that failed, in selection order.
    """

    metadata: GroveMetadata
    grove_dir: Path
    errors: list[str]

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class CloseResult:
    """Outcome of closing a worktree or a grove."""

    success: bool
    errors: list[str]
    message: str


def _now() -> str:
    return datetime.now(UTC).isoformat()


def load_grove(ctx: GroveContext, grove_id: str) -> tuple[GroveReference, GroveMetadata]:
    reference = ctx.registry.get_grove(grove_id)
    if reference is None:
        raise GroveNotFoundError(grove_id)

    metadata = ctx.registry.read_metadata(reference.path)
    if metadata is None:
        raise GroveMetadataMissingError(grove_id, reference.path)

    return reference, metadata


def allocate_worktree_path(
    grove_dir: Path, metadata: GroveMetadata, selection: RepositorySelection
) -> Path:
    """Path for a new worktree: <groveDir>/<repoName>[.<projectSlug>].worktree.

    A numeric suffix keeps the path unique when the same selection appears
    more than once in a grove.
    """
    base = selection.repository.name
    if selection.project_path:
        base = f"{base}.{project_slug(selection.project_path)}"

    taken = {wt.worktree_path for wt in metadata.worktrees}
    candidate = grove_dir / f"{base}.worktree"
    counter = 1
    while candidate in taken or candidate.exists():
        candidate = grove_dir / f"{base}-{counter}.worktree"
        counter += 1
    return candidate


def _branch_for_selection(selection: RepositorySelection, seed_name: str) -> str:
    branch = resolve_branch_name(selection.repository.path, seed_name, selection.project_path)
    if selection.project_path:
        branch = f"{branch}-{project_slug(selection.project_path)}"
    return branch


def _stage_files(
    selection: RepositorySelection, worktree_path: Path, sink: LogSink
) -> None:
    repo_path = selection.repository.path
    merged = resolve_merged(repo_path, selection.project_path)
    source = worktree_path.name

    passes = [(repo_path, worktree_path, merged.root_file_copy_patterns)]
    if selection.project_path:
        passes.append(
            (
                repo_path / selection.project_path,
                worktree_path / selection.project_path,
                merged.project_file_copy_patterns,
            )
        )

    for source_dir, dest_dir, patterns in passes:
        if not patterns:
            continue
        result = copy_files_from_patterns(source_dir, dest_dir, patterns)
        if result.copied_files:
            sink.emit(LogEvent(f"Copied {len(result.copied_files)} file(s)", source=source))
        if result.linked_files:
            sink.emit(LogEvent(f"Linked {len(result.linked_files)} file(s)", source=source))
        for error in result.errors:
            sink.emit(LogEvent(error, level="warning", source=source))


def _init_actions_for(selection: RepositorySelection, worktree_path: Path) -> list[InitAction]:
    merged = resolve_merged(selection.repository.path, selection.project_path)
    actions = [InitAction(command=cmd, cwd=worktree_path) for cmd in merged.root_init_actions]
    if selection.project_path:
        project_dir = worktree_path / selection.project_path
        actions.extend(InitAction(command=cmd, cwd=project_dir) for cmd in merged.project_init_actions)
    return actions


def _warn(sink: LogSink, message: str, source: str) -> None:
    logger.warning(message)
    sink.emit(LogEvent(message, level="warning", source=source))


def _refresh_repository(
    ctx: GroveContext, repo_path: Path, source: str, sink: LogSink
) -> str | None:
    """Bring the source repository up to date before branching from it.

    A clean checkout of the main branch is fetched and fast-forwarded, and the
    new worktree starts from HEAD. Otherwise the source checkout is left alone
    and the worktree starts from origin/<main> instead. Fetch and pull failures
    are warnings only.

    Returns:
        Commitish for the new worktree, or None to start from HEAD
    """
    main = ctx.git.detect_main_branch(repo_path)
    current = ctx.git.current_branch(repo_path)
    dirty = ctx.git.has_uncommitted_changes(repo_path)
    logger.debug("%s: main=%s current=%s dirty=%s", repo_path, main, current, dirty)

    fetch = ctx.git.fetch(repo_path)
    if not fetch.success:
        _warn(sink, f"Failed to fetch {repo_path.name}: {fetch.stderr.strip()}", source)

    if current == main and not dirty:
        pull = ctx.git.pull(repo_path)
        if not pull.success:
            _warn(sink, f"Failed to pull {repo_path.name}: {pull.stderr.strip()}", source)
            return None
        sink.emit(LogEvent(f"Updated {repo_path.name} to latest {main}", source=source))
        return None

    remote_main = f"origin/{main}"
    if not ctx.git.ref_exists(repo_path, remote_main):
        _warn(sink, f"{remote_main} not found in {repo_path.name}, branching from HEAD", source)
        return None

    reason = "has uncommitted changes" if dirty else f"is on {current or 'a detached HEAD'}"
    sink.emit(LogEvent(f"{repo_path.name} {reason}, branching from {remote_main}", source=source))
    return remote_main


def _materialize_worktree(
    ctx: GroveContext,
    grove_dir: Path,
    metadata: GroveMetadata,
    selection: RepositorySelection,
    *,
    seed_name: str,
    display_name: str | None,
    sink: LogSink,
) -> Worktree:
    """Refresh the source repository, then add one worktree and prepare it.

    Files are staged and init actions run once the worktree exists.

    Raises:
        DriverError: If the worktree could not be added; nothing else ran
    """
    repository = selection.repository
    worktree_path = allocate_worktree_path(grove_dir, metadata, selection)
    branch = _branch_for_selection(selection, seed_name)

    sink.emit(
        LogEvent(f"Creating worktree {worktree_path.name} on branch {branch}", source=worktree_path.name)
    )
    commitish = _refresh_repository(ctx, repository.path, worktree_path.name, sink)
    result = ctx.git.add_worktree(
        repository.path, worktree_path, branch=branch, commitish=commitish
    )
    if not result.success:
        label = repository.name
        if selection.project_path:
            label = f"{label}.{selection.project_path}"
        raise DriverError(
            f"Failed to create worktree for {label}: {result.stderr.strip()}", result
        )

    _stage_files(selection, worktree_path, sink)

    status = execute_init_actions(
        ctx.shell,
        _init_actions_for(selection, worktree_path),
        log_file=init_log_path(grove_dir, worktree_path.name),
        worktree_name=worktree_path.name,
        sink=sink,
    )

    return Worktree(
        repository_name=repository.name,
        repository_path=repository.path,
        worktree_path=worktree_path,
        branch=branch,
        project_path=selection.project_path,
        name=display_name,
        init_actions_status=status,
    )


def create_grove(
    ctx: GroveContext,
    name: str,
    selections: list[RepositorySelection],
    *,
    working_folder: Path | None = None,
    sink: LogSink | None = None,
) -> CreateGroveResult:
    """Create a grove with one worktree per selection.

    The grove directory, its metadata and its index entry are written before
    any worktree is added, so a partially failed creation still leaves a
    registered grove.

    Args:
        ctx: Application context
        name: Display name of the grove
        selections: Repositories (and optional sub-projects) to check out
        working_folder: Overrides the configured working folder; relative paths
            resolve against the current directory
        sink: Receives progress events

    Returns:
        CreateGroveResult with the final metadata and per-selection errors

    Raises:
        ValidationError: If the name is blank
        GroveAlreadyExistsError: If the grove directory already exists
        RegistryWriteError: If metadata or the index cannot be written
    """
    sink = sink if sink is not None else NullLogSink()
    if not name.strip():
        raise ValidationError("Grove name cannot be empty")

    # 1. Normalize the name
    normalized = normalize_grove_name(name)
    identifier = generate_identifier(name)

    # 2. Allocate the grove directory
    root = working_folder if working_folder is not None else ctx.working_folder
    root = root.expanduser().resolve()
    grove_dir = root / normalized
    if grove_dir.exists():
        raise GroveAlreadyExistsError(grove_dir)
    grove_dir.mkdir(parents=True)

    # 3. Register the grove before touching any repository
    created_at = _now()
    metadata = ctx.registry.write_metadata(
        grove_dir,
        GroveMetadata(
            id=secrets.token_hex(16),
            name=name,
            identifier=identifier,
            worktrees=[],
            created_at=created_at,
            updated_at=created_at,
        ),
    )
    ctx.registry.add_grove(
        GroveReference(
            id=metadata.id,
            name=name,
            path=grove_dir,
            created_at=created_at,
            updated_at=metadata.updated_at,
        )
    )
    write_context_file(grove_dir, name, created_at, selections)
    sink.emit(LogEvent(f"Created grove {name} at {grove_dir}"))

    # 4-6. Materialize each selection in order
    errors: list[str] = []
    succeeded: list[RepositorySelection] = []
    for selection in selections:
        try:
            worktree = _materialize_worktree(
                ctx,
                grove_dir,
                metadata,
                selection,
                seed_name=normalized,
                display_name=None,
                sink=sink,
            )
        except DriverError as e:
            logger.warning(str(e))
            errors.append(str(e))
            sink.emit(LogEvent(str(e), level="error"))
            continue

        metadata = ctx.registry.write_metadata(
            grove_dir, replace(metadata, worktrees=[*metadata.worktrees, worktree])
        )
        succeeded.append(selection)

    ctx.recent.record(succeeded)
    return CreateGroveResult(metadata=metadata, grove_dir=grove_dir, errors=errors)


def add_worktree(
    ctx: GroveContext,
    grove_id: str,
    selection: RepositorySelection,
    *,
    name: str | None = None,
    sink: LogSink | None = None,
) -> Worktree:
    """Add a worktree to an existing grove.

    Args:
        ctx: Application context
        grove_id: Grove to extend
        selection: Repository (and optional sub-project) to check out
        name: Seeds the branch name instead of the grove's own name
        sink: Receives progress events

    Returns:
        The new Worktree, already persisted

    Raises:
        GroveNotFoundError: If the grove is not indexed
        GroveMetadataMissingError: If its grove.json is missing or unreadable
        DriverError: If the worktree could not be added
    """
    sink = sink if sink is not None else NullLogSink()
    reference, metadata = load_grove(ctx, grove_id)

    seed_name = normalize_grove_name(name) if name else reference.path.name
    worktree = _materialize_worktree(
        ctx,
        reference.path,
        metadata,
        selection,
        seed_name=seed_name,
        display_name=name,
        sink=sink,
    )

    ctx.registry.write_metadata(
        reference.path, replace(metadata, worktrees=[*metadata.worktrees, worktree])
    )
    ctx.recent.record([selection])
    return worktree


def close_worktree(
    ctx: GroveContext,
    grove_id: str,
    worktree_path: Path,
    *,
    sink: LogSink | None = None,
) -> CloseResult:
    """Remove a worktree and mark it closed.

    The worktree is marked closed whether or not the driver succeeds. If its
    directory still exists afterwards it is deleted directly.

    Returns:
        CloseResult whose `success` reflects the driver removal

    Raises:
        GroveNotFoundError: If the grove is not indexed
        GroveMetadataMissingError: If its grove.json is missing or unreadable
        WorktreeNotFoundError: If the grove has no worktree at that path
        WorktreeAlreadyClosedError: If the worktree was closed before
    """
    sink = sink if sink is not None else NullLogSink()
    reference, metadata = load_grove(ctx, grove_id)

    worktree = metadata.find_worktree(worktree_path)
    if worktree is None:
        raise WorktreeNotFoundError(grove_id, worktree_path)
    if worktree.closed:
        raise WorktreeAlreadyClosedError(worktree_path)

    source = worktree_path.name
    sink.emit(LogEvent(f"Removing worktree {worktree_path}", source=source))
    result = ctx.git.remove_worktree(worktree.repository_path, worktree_path, force=True)

    errors: list[str] = []
    last_error: str | None = None
    if not result.success:
        last_error = f"Failed to remove worktree {worktree_path}: {result.stderr.strip()}"
        errors.append(last_error)
        logger.warning(last_error)
        sink.emit(LogEvent(last_error, level="error", source=source))

    if worktree_path.exists():
        try:
            shutil.rmtree(worktree_path)
        except OSError as e:
            message = f"Failed to delete worktree folder {worktree_path}: {e}"
            errors.append(message)
            sink.emit(LogEvent(message, level="error", source=source))

    closed = replace(worktree, closed=True, closed_at=_now(), last_error=last_error)
    ctx.registry.write_metadata(
        reference.path,
        replace(
            metadata,
            worktrees=[closed if wt.worktree_path == worktree_path else wt for wt in metadata.worktrees],
        ),
    )

    if result.success:
        sink.emit(LogEvent(f"Closed worktree {worktree_path.name}", level="success", source=source))
        return CloseResult(success=True, errors=errors, message="Worktree closed successfully")
    return CloseResult(success=False, errors=errors, message="Worktree closed with errors")


def close_grove(ctx: GroveContext, grove_id: str, *, sink: LogSink | None = None) -> CloseResult:
    """Close every open worktree, then delete the grove if all closed cleanly.

    If any worktree fails to close, the grove stays registered with its mix of
    closed and open worktrees so the close can be retried.

    Raises:
        GroveNotFoundError: If the grove is not indexed
        GroveMetadataMissingError: If its grove.json is missing or unreadable
    """
    sink = sink if sink is not None else NullLogSink()
    reference, metadata = load_grove(ctx, grove_id)

    errors: list[str] = []
    for worktree in metadata.open_worktrees():
        result = close_worktree(ctx, grove_id, worktree.worktree_path, sink=sink)
        errors.extend(result.errors)
        if not result.success and not result.errors:
            errors.append(f"Failed to close worktree {worktree.worktree_path}")

    if errors:
        return CloseResult(success=False, errors=errors, message="Grove closed with some errors")

    if reference.path.exists():
        try:
            shutil.rmtree(reference.path)
        except OSError as e:
            message = f"Failed to delete grove folder {reference.path}: {e}"
            sink.emit(LogEvent(message, level="error"))
            return CloseResult(success=False, errors=[message], message="Grove closed with some errors")

    ctx.registry.remove_grove(grove_id)
    sink.emit(LogEvent(f"Closed grove {reference.name}", level="success"))
    return CloseResult(success=True, errors=[], message="Grove closed successfully")
