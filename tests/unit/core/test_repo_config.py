"""Tests for repository config reading, merging and branch resolution."""

import logging
from pathlib import Path

import pytest

from grove.core.repo_config import (
    layer_project_config,
    merge_file_copy_patterns,
    merge_shared_and_local,
    parse_repo_config,
    read_repo_config,
    resolve_branch_name,
    resolve_merged,
    validate_branch_template,
)
from grove.core.types import FileCopyPattern, GroveRepoConfig, IDECommand
from tests.test_utils.repos import write_config


def test_read_repo_config_without_files_is_empty(tmp_path: Path) -> None:
    """A directory with no config files yields an empty config."""
    assert read_repo_config(tmp_path) == GroveRepoConfig()


def test_local_patterns_union_without_duplicates(tmp_path: Path) -> None:
    """Shared ["*.md"] and local ["*.md", "*.json"] merge to exactly those two."""
    write_config(tmp_path, {"fileCopyPatterns": ["*.md"]})
    write_config(tmp_path, {"fileCopyPatterns": ["*.md", "*.json"]}, local=True)

    config = read_repo_config(tmp_path)

    assert config.file_copy_patterns == [FileCopyPattern("*.md"), FileCopyPattern("*.json")]


def test_local_pattern_replaces_base_entry_in_place() -> None:
    """A local entry with the same pattern wins but keeps the base position."""
    merged = merge_file_copy_patterns(
        [FileCopyPattern(".env"), FileCopyPattern("*.md")],
        [FileCopyPattern(".env", mode="link")],
    )
    assert merged == [FileCopyPattern(".env", mode="link"), FileCopyPattern("*.md")]


def test_local_scalars_override_shared(tmp_path: Path) -> None:
    """Scalar and object fields from the local file replace shared ones."""
    write_config(
        tmp_path,
        {"branchNameTemplate": "team/${GROVE_NAME}", "initActions": ["npm ci"], "ide": "@vscode"},
    )
    write_config(tmp_path, {"initActions": ["pnpm install"]}, local=True)

    config = read_repo_config(tmp_path)

    assert config.branch_name_template == "team/${GROVE_NAME}"
    assert config.init_actions == ["pnpm install"]
    assert config.ide == "@vscode"


def test_local_empty_patterns_keep_shared_patterns() -> None:
    """An empty local list adds nothing but removes nothing."""
    merged = merge_shared_and_local(
        GroveRepoConfig(file_copy_patterns=[FileCopyPattern(".env")]),
        GroveRepoConfig(file_copy_patterns=[]),
    )
    assert merged.file_copy_patterns == [FileCopyPattern(".env")]


def test_malformed_config_degrades_to_empty_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Invalid JSON is ignored with a warning; the other file still applies."""
    (tmp_path / ".grove.json").write_text("{not json", encoding="utf-8")
    write_config(tmp_path, {"initActions": ["make"]}, local=True)

    with caplog.at_level(logging.WARNING):
        config = read_repo_config(tmp_path)

    assert config.init_actions == ["make"]
    assert "Ignoring malformed grove config" in caplog.text


def test_wrongly_typed_field_degrades_to_empty(tmp_path: Path) -> None:
    """A field with the wrong shape invalidates that file."""
    write_config(tmp_path, {"fileCopyPatterns": "*.md", "initActions": ["make"]})
    assert read_repo_config(tmp_path) == GroveRepoConfig()


def test_parse_accepts_pattern_tuples_and_ide_commands() -> None:
    """Pattern entries may carry a mode; ide may be a literal command."""
    config = parse_repo_config(
        {
            "fileCopyPatterns": [".env", ["node_modules/.cache/**", "link"]],
            "ide": {"command": "code", "args": ["{path}"]},
            "claudeSessionTemplates": {"kitty": {"content": "launch ${WORKING_DIR}"}},
        }
    )
    assert config.file_copy_patterns == [
        FileCopyPattern(".env"),
        FileCopyPattern("node_modules/.cache/**", mode="link"),
    ]
    assert config.ide == IDECommand(command="code", args=["{path}"])
    assert config.claude_session_templates == {"kitty": "launch ${WORKING_DIR}"}


def test_parse_rejects_unknown_pattern_mode() -> None:
    """Only copy and link modes are accepted."""
    with pytest.raises(ValueError):
        parse_repo_config({"fileCopyPatterns": [[".env", "move"]]})


def test_project_template_overrides_root(tmp_path: Path) -> None:
    """A project branch template replaces the root template."""
    write_config(tmp_path, {"branchNameTemplate": "root/${GROVE_NAME}"})
    write_config(tmp_path / "packages" / "api", {"branchNameTemplate": "proj/${GROVE_NAME}"})

    merged = resolve_merged(tmp_path, "packages/api")

    assert merged.branch_name_template == "proj/${GROVE_NAME}"


def test_project_without_template_inherits_root(tmp_path: Path) -> None:
    """Fields the project does not declare come from the root."""
    write_config(tmp_path, {"branchNameTemplate": "root/${GROVE_NAME}", "ide": "@idea"})
    write_config(tmp_path / "web", {"initActions": ["npm ci"]})

    merged = resolve_merged(tmp_path, "web")

    assert merged.branch_name_template == "root/${GROVE_NAME}"
    assert merged.ide == "@idea"


def test_root_and_project_lists_stay_separate(tmp_path: Path) -> None:
    """Copy patterns and init actions are kept as two staged lists."""
    write_config(tmp_path, {"fileCopyPatterns": [".env"], "initActions": ["make deps"]})
    write_config(tmp_path / "web", {"fileCopyPatterns": [], "initActions": ["npm ci"]})

    merged = resolve_merged(tmp_path, "web")

    assert merged.root_file_copy_patterns == [FileCopyPattern(".env")]
    assert merged.project_file_copy_patterns == []
    assert merged.root_init_actions == ["make deps"]
    assert merged.project_init_actions == ["npm ci"]


def test_layer_without_project_has_empty_project_lists() -> None:
    """A plain repository selection has no project pass."""
    merged = layer_project_config(GroveRepoConfig(init_actions=["make"]), None)
    assert merged.root_init_actions == ["make"]
    assert merged.project_init_actions == []
    assert merged.project_file_copy_patterns == []


def test_validate_branch_template() -> None:
    """Templates must contain the placeholder."""
    assert validate_branch_template("feature/${GROVE_NAME}")
    assert not validate_branch_template("feature/static")


def test_resolve_branch_name_defaults(tmp_path: Path) -> None:
    """Without a template the branch is grove/<name>."""
    assert resolve_branch_name(tmp_path, "fix-abc12") == "grove/fix-abc12"


def test_resolve_branch_name_substitutes_every_placeholder(tmp_path: Path) -> None:
    """All placeholder occurrences are replaced."""
    write_config(tmp_path, {"branchNameTemplate": "${GROVE_NAME}/wip-${GROVE_NAME}"})
    assert resolve_branch_name(tmp_path, "fix-abc12") == "fix-abc12/wip-fix-abc12"


def test_invalid_template_falls_back_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """A template without the placeholder logs a warning and uses the default."""
    write_config(tmp_path, {"branchNameTemplate": "feature/static"})

    with caplog.at_level(logging.WARNING):
        branch = resolve_branch_name(tmp_path, "fix-abc12")

    assert branch == "grove/fix-abc12"
    assert "does not contain" in caplog.text
