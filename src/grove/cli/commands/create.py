"""Create command: start a new grove."""

import json
from pathlib import Path

import click

from grove.cli.ensure import Ensure, handle_grove_errors
from grove.cli.output import format_error, machine_output, run_with_progress, user_output
from grove.cli.selection import parse_repo_argument
from grove.core.context import GroveContext
from grove.core.lifecycle import CreateGroveResult, create_grove
from grove.core.registry import worktree_to_dict


def _result_to_json(result: CreateGroveResult) -> str:
    return json.dumps(
        {
            "id": result.metadata.id,
            "name": result.metadata.name,
            "identifier": result.metadata.identifier,
            "path": str(result.grove_dir),
            "worktrees": [worktree_to_dict(wt) for wt in result.metadata.worktrees],
            "errors": result.errors,
        },
        indent=2,
    )


def _print_summary(result: CreateGroveResult) -> None:
    user_output()
    user_output(
        f"Grove {click.style(result.metadata.name, fg='cyan', bold=True)} "
        f"({result.metadata.id}) at {result.grove_dir}"
    )
    for wt in result.metadata.worktrees:
        line = f"  {wt.worktree_path.name} on {click.style(wt.branch, fg='yellow')}"
        status = wt.init_actions_status
        if status is not None and not status.success:
            line += click.style(
                f" (init actions {status.successful_actions}/{status.total_actions}, "
                f"see {status.log_file})",
                fg="red",
            )
        user_output(line)


@click.command("create")
@click.argument("name")
@click.argument("repos", nargs=-1)
@click.option(
    "--working-folder",
    type=click.Path(file_okay=False, path_type=Path),
    help="Create the grove under this folder instead of the configured working folder.",
)
@click.option("--json", "output_json", is_flag=True, help="Print the result as JSON on stdout.")
@click.pass_obj
@handle_grove_errors
def create_cmd(
    ctx: GroveContext,
    name: str,
    repos: tuple[str, ...],
    working_folder: Path | None,
    output_json: bool,
) -> None:
    """Create a grove NAME with a worktree for each REPO.

    REPO is a registered repository name, or NAME.PROJECT for a sub-project
    of a monorepo.
    """
    Ensure.not_empty(name.strip(), "Grove name cannot be empty")

    # 1. Resolve every selection before creating anything
    selections = [parse_repo_argument(ctx, repo) for repo in repos]

    # 2. Create the grove
    user_output(f"Creating grove {click.style(name, fg='cyan', bold=True)}...")
    result = run_with_progress(
        lambda sink: create_grove(
            ctx, name, selections, working_folder=working_folder, sink=sink
        )
    )

    # 3. Report
    if output_json:
        machine_output(_result_to_json(result))
    else:
        _print_summary(result)

    if result.errors:
        for error in result.errors:
            user_output(format_error(error))
        raise SystemExit(1)
