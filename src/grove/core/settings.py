"""Global settings and storage locations.

Grove keeps its own state under ~/.grove (override with GROVE_HOME):

- settings.json: working folder and terminal/IDE defaults
- repositories.json: registered repositories
- groves.json: index of groves
- recent.json: recently used repository selections
- sessions.json: reserved for session tracking

Worktrees themselves live under the working folder, ~/grove-worktrees by default.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from grove.core.json_store import load_json_document, save_json_document

GROVE_HOME_ENV = "GROVE_HOME"


def default_grove_home() -> Path:
    """Storage folder, honoring GROVE_HOME."""
    override = os.environ.get(GROVE_HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".grove"


def default_working_folder() -> Path:
    return Path.home() / "grove-worktrees"


@dataclass(frozen=True)
class StoragePaths:
    """Locations of grove's global JSON documents."""

    grove_folder: Path
    settings_path: Path
    repositories_path: Path
    groves_index_path: Path
    recent_selections_path: Path
    sessions_path: Path

    @staticmethod
    def for_folder(grove_folder: Path) -> "StoragePaths":
        return StoragePaths(
            grove_folder=grove_folder,
            settings_path=grove_folder / "settings.json",
            repositories_path=grove_folder / "repositories.json",
            groves_index_path=grove_folder / "groves.json",
            recent_selections_path=grove_folder / "recent.json",
            sessions_path=grove_folder / "sessions.json",
        )


@dataclass(frozen=True)
class Settings:
    """Immutable global settings.

    Keys grove does not interpret are kept in `extra` and written back on save.
    """

    working_folder: Path
    terminal: dict[str, Any] | None = None
    selected_ide: str | None = None
    ide_configs: dict[str, Any] | None = None
    claude_session_templates: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


_KNOWN_KEYS = {"workingFolder", "terminal", "selectedIDE", "ideConfigs", "claudeSessionTemplates"}


def settings_from_dict(data: dict[str, Any]) -> Settings:
    working_folder = data.get("workingFolder")
    return Settings(
        working_folder=(
            Path(working_folder).expanduser()
            if isinstance(working_folder, str) and working_folder
            else default_working_folder()
        ),
        terminal=data.get("terminal"),
        selected_ide=data.get("selectedIDE"),
        ide_configs=data.get("ideConfigs"),
        claude_session_templates=data.get("claudeSessionTemplates"),
        extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
    )


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    data: dict[str, Any] = dict(settings.extra)
    data["workingFolder"] = str(settings.working_folder)
    if settings.terminal is not None:
        data["terminal"] = settings.terminal
    if settings.selected_ide is not None:
        data["selectedIDE"] = settings.selected_ide
    if settings.ide_configs is not None:
        data["ideConfigs"] = settings.ide_configs
    if settings.claude_session_templates is not None:
        data["claudeSessionTemplates"] = settings.claude_session_templates
    return data


class SettingsStore(ABC):
    """Abstract interface for loading and saving global settings."""

    @abstractmethod
    def exists(self) -> bool:
        """Check if settings have been saved."""
        ...

    @abstractmethod
    def load(self) -> Settings:
        """Load settings, falling back to defaults when none are saved."""
        ...

    @abstractmethod
    def save(self, settings: Settings) -> None:
        """Persist settings.

        Raises:
            RegistryWriteError: If the settings file cannot be written
        """
        ...


class FilesystemSettingsStore(SettingsStore):
    """Production implementation that reads/writes settings.json."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> Settings:
        return settings_from_dict(load_json_document(self._path, {}))

    def save(self, settings: Settings) -> None:
        save_json_document(self._path, settings_to_dict(settings))


class InMemorySettingsStore(SettingsStore):
    """Test implementation that keeps settings in memory."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings

    def exists(self) -> bool:
        return self._settings is not None

    def load(self) -> Settings:
        if self._settings is None:
            return Settings(working_folder=default_working_folder())
        return self._settings

    def save(self, settings: Settings) -> None:
        self._settings = settings
