"""Add-worktree command: extend an existing grove."""

import click

from grove.cli.ensure import handle_grove_errors
from grove.cli.output import run_with_progress, user_output
from grove.cli.selection import parse_repo_argument
from grove.core.context import GroveContext
from grove.core.lifecycle import add_worktree


@click.command("add-worktree")
@click.argument("grove_id")
@click.argument("name")
@click.argument("repo")
@click.pass_obj
@handle_grove_errors
def add_worktree_cmd(ctx: GroveContext, grove_id: str, name: str, repo: str) -> None:
    """Add a worktree of REPO named NAME to grove GROVE_ID."""
    selection = parse_repo_argument(ctx, repo)
    worktree = run_with_progress(
        lambda sink: add_worktree(ctx, grove_id, selection, name=name, sink=sink)
    )

    user_output(
        f"Added {click.style(worktree.worktree_path.name, fg='cyan')} "
        f"on {click.style(worktree.branch, fg='yellow')} at {worktree.worktree_path}"
    )
    status = worktree.init_actions_status
    if status is not None and not status.success:
        user_output(
            click.style(
                f"Init actions failed ({status.successful_actions}/{status.total_actions}), "
                f"see {status.log_file}",
                fg="red",
            )
        )
