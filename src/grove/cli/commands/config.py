"""Config commands: inspect merged repository config and global settings."""

import json
from dataclasses import replace
from pathlib import Path
from typing import Any

import click

from grove.cli.ensure import handle_grove_errors
from grove.cli.output import machine_output, user_output
from grove.cli.selection import parse_repo_argument
from grove.core.context import GroveContext
from grove.core.repo_config import resolve_branch_name, resolve_merged
from grove.core.types import FileCopyPattern, IDECommand, MergedGroveConfig


def _patterns(patterns: list[FileCopyPattern]) -> list[Any]:
    return [p.pattern if p.mode == "copy" else [p.pattern, p.mode] for p in patterns]


def _merged_to_dict(merged: MergedGroveConfig) -> dict[str, Any]:
    ide: Any = merged.ide
    if isinstance(ide, IDECommand):
        ide = {"command": ide.command, "args": ide.args}
    return {
        "branchNameTemplate": merged.branch_name_template,
        "rootFileCopyPatterns": _patterns(merged.root_file_copy_patterns),
        "projectFileCopyPatterns": _patterns(merged.project_file_copy_patterns),
        "rootInitActions": merged.root_init_actions,
        "projectInitActions": merged.project_init_actions,
        "ide": ide,
        "claudeSessionTemplates": merged.claude_session_templates,
    }


@click.group("config")
def config_group() -> None:
    """Inspect and change configuration."""


@config_group.command("show")
@click.argument("repo")
@click.option("--grove-name", default="example", help="Grove name used to preview the branch.")
@click.pass_obj
@handle_grove_errors
def show_cmd(ctx: GroveContext, repo: str, grove_name: str) -> None:
    """Print the merged configuration for REPO (name or name.project) as JSON."""
    selection = parse_repo_argument(ctx, repo)
    repo_path = selection.repository.path
    data = _merged_to_dict(resolve_merged(repo_path, selection.project_path))
    data["branchPreview"] = resolve_branch_name(repo_path, grove_name, selection.project_path)
    machine_output(json.dumps(data, indent=2))


@config_group.command("working-folder")
@click.argument("path", type=click.Path(file_okay=False, path_type=Path), required=False)
@click.pass_obj
@handle_grove_errors
def working_folder_cmd(ctx: GroveContext, path: Path | None) -> None:
    """Show the working folder, or set it to PATH."""
    if path is None:
        machine_output(str(ctx.settings.working_folder))
        return

    resolved = path.expanduser().resolve()
    ctx.settings_store.save(replace(ctx.settings_store.load(), working_folder=resolved))
    user_output(f"Working folder set to {resolved}")
