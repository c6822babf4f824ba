"""Status command: safety check every open worktree of a grove."""

import click

from grove.cli.ensure import handle_grove_errors
from grove.cli.output import user_output
from grove.core.context import GroveContext
from grove.core.lifecycle import load_grove
from grove.core.safety import check_grove


@click.command("status")
@click.argument("grove_id")
@click.pass_obj
@handle_grove_errors
def status_cmd(ctx: GroveContext, grove_id: str) -> None:
    """Show whether each open worktree of GROVE_ID is safe to close."""
    reference, metadata = load_grove(ctx, grove_id)
    user_output(f"{click.style(reference.name, fg='cyan', bold=True)} ({reference.id})")

    reports = check_grove(ctx.git, metadata)
    if not reports:
        user_output("  No open worktrees.")
        return

    for report in reports:
        if report.is_issue_free:
            user_output(f"  {report.worktree_path.name}: {click.style('safe to close', fg='green')}")
        else:
            issues = ", ".join(report.issues())
            user_output(f"  {report.worktree_path.name}: {click.style(issues, fg='yellow')}")
        user_output(
            f"    uncommitted={report.has_uncommitted_changes} "
            f"unpushed={report.has_unpushed_commits} upstream={report.upstream_status}"
        )
