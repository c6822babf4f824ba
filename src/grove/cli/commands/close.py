"""Close commands: tear down a single worktree or a whole grove.

Both run the safety check first. Issue-free worktrees need a yes/no
confirmation (skippable with --yes); anything else requires typing the
confirmation phrase.
"""

import click

from grove.cli.ensure import Ensure, handle_grove_errors
from grove.cli.output import console_sink, format_error, user_output
from grove.cli.selection import find_worktree_path
from grove.core.context import GroveContext
from grove.core.lifecycle import CloseResult, close_grove, close_worktree, load_grove
from grove.core.safety import (
    CONFIRMATION_PHRASE,
    SafetyReport,
    check_grove,
    check_worktree,
    requires_confirmation_phrase,
)


def _show_reports(reports: list[SafetyReport]) -> None:
    for report in reports:
        if report.is_issue_free:
            user_output(f"  {click.style('✓', fg='green')} {report.worktree_path}")
        else:
            issues = ", ".join(report.issues())
            user_output(f"  {click.style('⚠', fg='yellow')} {report.worktree_path}: {issues}")


def _confirm(reports: list[SafetyReport], prompt: str, yes: bool) -> bool:
    """Ask for the confirmation the safety reports call for."""
    if requires_confirmation_phrase(reports):
        user_output(
            click.style("Closing will permanently delete work that may not be saved elsewhere.", fg="yellow")
        )
        typed = click.prompt(
            f'Type "{CONFIRMATION_PHRASE}" to confirm',
            default="",
            show_default=False,
            err=True,
        )
        return typed == CONFIRMATION_PHRASE

    if yes:
        return True
    return click.confirm(prompt, default=False, err=True)


def _report_result(result: CloseResult) -> None:
    if result.success:
        user_output(click.style(result.message, fg="green"))
        return
    for error in result.errors:
        user_output(format_error(error))
    user_output(click.style(result.message, fg="red"))
    raise SystemExit(1)


@click.command("close-worktree")
@click.argument("grove_id")
@click.argument("worktree")
@click.option("-y", "--yes", is_flag=True, help="Skip the yes/no prompt for issue-free worktrees.")
@click.pass_obj
@handle_grove_errors
def close_worktree_cmd(ctx: GroveContext, grove_id: str, worktree: str, yes: bool) -> None:
    """Close WORKTREE (path or folder name) in grove GROVE_ID."""
    _, metadata = load_grove(ctx, grove_id)
    worktree_path = Ensure.not_none(
        find_worktree_path(metadata, worktree),
        f"Worktree not found in grove {grove_id}: {worktree}",
    )

    existing = metadata.find_worktree(worktree_path)
    if existing is not None and not existing.closed:
        report = check_worktree(ctx.git, worktree_path)
        _show_reports([report])
        if not _confirm([report], f"Close worktree {worktree_path.name}?", yes):
            user_output(click.style("⭕ Aborted", fg="yellow"))
            raise SystemExit(0)

    _report_result(close_worktree(ctx, grove_id, worktree_path, sink=console_sink()))


@click.command("close")
@click.argument("grove_id")
@click.option("-y", "--yes", is_flag=True, help="Skip the yes/no prompt for issue-free groves.")
@click.pass_obj
@handle_grove_errors
def close_cmd(ctx: GroveContext, grove_id: str, yes: bool) -> None:
    """Close every worktree of grove GROVE_ID and delete it."""
    reference, metadata = load_grove(ctx, grove_id)

    reports = check_grove(ctx.git, metadata)
    _show_reports(reports)
    if not _confirm(reports, f"Close grove {reference.name}?", yes):
        user_output(click.style("⭕ Aborted", fg="yellow"))
        raise SystemExit(0)

    _report_result(close_grove(ctx, grove_id, sink=console_sink()))
