"""Repository configuration resolution.

Each repository directory, and each monorepo sub-project directory, may carry
two config files:

- .grove.json: shared, committed
- .grove.local.json: local override, not committed

The local file overrides scalar and object fields. For `fileCopyPatterns` the
two lists are unioned, de-duplicated by pattern string, with local entries
replacing base entries for the same pattern.

A sub-project layers over its repository root: the branch template, `ide` and
session templates override when declared; copy patterns and init actions stay
as separate root and project lists.
"""

import json
import logging
from pathlib import Path
from typing import Any

from grove.core.types import (
    FileCopyPattern,
    GroveRepoConfig,
    IDECommand,
    MergedGroveConfig,
)

logger = logging.getLogger(__name__)

GROVE_CONFIG_FILENAME = ".grove.json"
GROVE_LOCAL_CONFIG_FILENAME = ".grove.local.json"
GROVE_NAME_PLACEHOLDER = "${GROVE_NAME}"
DEFAULT_BRANCH_PREFIX = "grove/"


def _parse_file_copy_pattern(raw: Any) -> FileCopyPattern:
    if isinstance(raw, str):
        return FileCopyPattern(pattern=raw)
    if (
        isinstance(raw, list)
        and len(raw) == 2
        and isinstance(raw[0], str)
        and raw[1] in ("copy", "link")
    ):
        return FileCopyPattern(pattern=raw[0], mode=raw[1])
    raise ValueError(f"Invalid fileCopyPatterns entry: {raw!r}")


def _parse_ide(raw: Any) -> str | IDECommand:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, dict) and isinstance(raw.get("command"), str):
        args = raw.get("args", [])
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise ValueError("ide.args must be a list of strings")
        return IDECommand(command=raw["command"], args=list(args))
    raise ValueError(f"Invalid ide value: {raw!r}")


def _parse_session_templates(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict):
        raise ValueError("claudeSessionTemplates must be an object")
    templates: dict[str, str] = {}
    for terminal, template in raw.items():
        if not isinstance(template, dict) or not isinstance(template.get("content"), str):
            raise ValueError(f"claudeSessionTemplates.{terminal} must have string content")
        templates[terminal] = template["content"]
    return templates


def parse_repo_config(data: Any) -> GroveRepoConfig:
    """Build a GroveRepoConfig from decoded JSON.

    Raises:
        ValueError: If the document or any declared field has the wrong shape
    """
    if not isinstance(data, dict):
        raise ValueError("Config must be a JSON object")

    template = data.get("branchNameTemplate")
    if template is not None and not isinstance(template, str):
        raise ValueError("branchNameTemplate must be a string")

    patterns: list[FileCopyPattern] | None = None
    if "fileCopyPatterns" in data:
        raw_patterns = data["fileCopyPatterns"]
        if not isinstance(raw_patterns, list):
            raise ValueError("fileCopyPatterns must be a list")
        patterns = [_parse_file_copy_pattern(entry) for entry in raw_patterns]

    actions: list[str] | None = None
    if "initActions" in data:
        raw_actions = data["initActions"]
        if not isinstance(raw_actions, list) or not all(isinstance(a, str) for a in raw_actions):
            raise ValueError("initActions must be a list of strings")
        actions = list(raw_actions)

    ide = _parse_ide(data["ide"]) if data.get("ide") is not None else None

    templates = None
    if data.get("claudeSessionTemplates") is not None:
        templates = _parse_session_templates(data["claudeSessionTemplates"])

    return GroveRepoConfig(
        branch_name_template=template,
        file_copy_patterns=patterns,
        init_actions=actions,
        ide=ide,
        claude_session_templates=templates,
    )


def load_config_file(path: Path) -> GroveRepoConfig:
    """Load one config file. Missing or malformed files yield an empty config."""
    if not path.exists():
        return GroveRepoConfig()

    try:
        return parse_repo_config(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        logger.warning(f"Ignoring malformed grove config {path}: {e}")
        return GroveRepoConfig()


def merge_file_copy_patterns(
    base: list[FileCopyPattern], local: list[FileCopyPattern]
) -> list[FileCopyPattern]:
    """Union two pattern lists keyed by pattern string; local entries win.

    Order follows first appearance, so a local entry that replaces a base entry
    keeps the base entry's position.
    """
    merged: dict[str, FileCopyPattern] = {}
    for entry in base:
        merged[entry.pattern] = entry
    for entry in local:
        merged[entry.pattern] = entry
    return list(merged.values())


def merge_shared_and_local(base: GroveRepoConfig, local: GroveRepoConfig) -> GroveRepoConfig:
    """Layer a .grove.local.json config over a .grove.json config."""
    if local.file_copy_patterns is None:
        patterns = base.file_copy_patterns
    else:
        patterns = merge_file_copy_patterns(base.file_copy_patterns or [], local.file_copy_patterns)

    return GroveRepoConfig(
        branch_name_template=(
            local.branch_name_template
            if local.branch_name_template is not None
            else base.branch_name_template
        ),
        file_copy_patterns=patterns,
        init_actions=local.init_actions if local.init_actions is not None else base.init_actions,
        ide=local.ide if local.ide is not None else base.ide,
        claude_session_templates=(
            local.claude_session_templates
            if local.claude_session_templates is not None
            else base.claude_session_templates
        ),
    )


def read_repo_config(repo_dir: Path) -> GroveRepoConfig:
    """Read the shared and local config files of one directory and merge them."""
    base = load_config_file(repo_dir / GROVE_CONFIG_FILENAME)
    local = load_config_file(repo_dir / GROVE_LOCAL_CONFIG_FILENAME)
    return merge_shared_and_local(base, local)


def layer_project_config(
    root: GroveRepoConfig, project: GroveRepoConfig | None
) -> MergedGroveConfig:
    """Combine a repository root config with an optional sub-project config.

    Args:
        root: Config read at the repository root
        project: Config read at the sub-project folder, or None for a plain
            repository selection

    Returns:
        The effective MergedGroveConfig
    """
    if project is None:
        project = GroveRepoConfig()

    return MergedGroveConfig(
        branch_name_template=(
            project.branch_name_template
            if project.branch_name_template is not None
            else root.branch_name_template
        ),
        root_file_copy_patterns=list(root.file_copy_patterns or []),
        project_file_copy_patterns=list(project.file_copy_patterns or []),
        root_init_actions=list(root.init_actions or []),
        project_init_actions=list(project.init_actions or []),
        ide=project.ide if project.ide is not None else root.ide,
        claude_session_templates=(
            project.claude_session_templates
            if project.claude_session_templates is not None
            else root.claude_session_templates
        ),
    )


def resolve_merged(repo_path: Path, project_path: str | None = None) -> MergedGroveConfig:
    """Resolve the effective config for a repository, optionally narrowed to a sub-project."""
    root = read_repo_config(repo_path)
    project = read_repo_config(repo_path / project_path) if project_path else None
    return layer_project_config(root, project)


def validate_branch_template(template: str) -> bool:
    """Return True if the template contains the grove name placeholder."""
    return GROVE_NAME_PLACEHOLDER in template


def apply_branch_template(template: str, grove_name: str) -> str:
    """Substitute every placeholder occurrence with the grove name."""
    return template.replace(GROVE_NAME_PLACEHOLDER, grove_name)


def default_branch_name(grove_name: str) -> str:
    return f"{DEFAULT_BRANCH_PREFIX}{grove_name}"


def resolve_branch_name(repo_path: Path, grove_name: str, project_path: str | None = None) -> str:
    """Branch name for a new worktree of this selection.

    Falls back to `grove/<grove_name>` when no template is configured or the
    configured template lacks the placeholder. Never raises.

    Args:
        repo_path: Repository root
        grove_name: Normalized grove name (slug plus identifier)
        project_path: Optional monorepo sub-project path

    Returns:
        The branch name to create
    """
    template = resolve_merged(repo_path, project_path).branch_name_template
    if template is None:
        return default_branch_name(grove_name)

    if not validate_branch_template(template):
        logger.warning(
            f"Branch name template {template!r} for {repo_path} does not contain "
            f"{GROVE_NAME_PLACEHOLDER}, using default"
        )
        return default_branch_name(grove_name)

    return apply_branch_template(template, grove_name)
