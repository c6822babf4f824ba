"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from grove.core.git.abc import Git
from grove.core.git.real import RealGit
from grove.core.recent import RecentSelectionsStore
from grove.core.registry import GroveRegistry
from grove.core.repositories import RepositoryStore
from grove.core.settings import (
    FilesystemSettingsStore,
    InMemorySettingsStore,
    Settings,
    SettingsStore,
    StoragePaths,
    default_grove_home,
)
from grove.core.shell import RealShell, Shell


@dataclass(frozen=True)
class GroveContext:
    """Immutable context holding all dependencies for grove operations.

    Created at the CLI entry point and threaded through commands via click's
    `obj`. Frozen to prevent accidental modification at runtime.
    """

    git: Git
    shell: Shell
    paths: StoragePaths
    settings_store: SettingsStore
    settings: Settings
    repositories: RepositoryStore
    registry: GroveRegistry
    recent: RecentSelectionsStore

    @property
    def working_folder(self) -> Path:
        return self.settings.working_folder

    @staticmethod
    def for_test(
        home: Path,
        *,
        git: Git | None = None,
        shell: Shell | None = None,
        settings: Settings | None = None,
    ) -> "GroveContext":
        """Create a context rooted in a temporary directory.

        Global JSON documents live under `home/.grove`, worktrees under
        `home/grove-worktrees` unless `settings` says otherwise. Settings are
        kept in memory.

        Args:
            home: Temporary directory standing in for the user's home
            git: Git implementation (defaults to an empty FakeGit)
            shell: Shell implementation (defaults to a FakeShell where every
                command succeeds)
            settings: Settings to start from

        Returns:
            GroveContext wired to fakes and temporary storage
        """
        from tests.fakes.shell import FakeShell

        from grove.core.git.fake import FakeGit

        paths = StoragePaths.for_folder(home / ".grove")
        resolved_settings = (
            settings if settings is not None else Settings(working_folder=home / "grove-worktrees")
        )
        return GroveContext(
            git=git if git is not None else FakeGit(),
            shell=shell if shell is not None else FakeShell(),
            paths=paths,
            settings_store=InMemorySettingsStore(resolved_settings),
            settings=resolved_settings,
            repositories=RepositoryStore(paths.repositories_path),
            registry=GroveRegistry(paths.groves_index_path),
            recent=RecentSelectionsStore(paths.recent_selections_path),
        )


def create_context(grove_home: Path | None = None) -> GroveContext:
    """Create production context with real implementations.

    Called once at CLI entry point. Settings are loaded eagerly.

    Args:
        grove_home: Storage folder; defaults to ~/.grove or $GROVE_HOME

    Returns:
        GroveContext with real implementations
    """
    paths = StoragePaths.for_folder(grove_home if grove_home is not None else default_grove_home())
    settings_store = FilesystemSettingsStore(paths.settings_path)

    return GroveContext(
        git=RealGit(),
        shell=RealShell(),
        paths=paths,
        settings_store=settings_store,
        settings=settings_store.load(),
        repositories=RepositoryStore(paths.repositories_path),
        registry=GroveRegistry(paths.groves_index_path),
        recent=RecentSelectionsStore(paths.recent_selections_path),
    )
