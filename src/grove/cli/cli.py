import logging
import os

import click

from grove.cli.commands.add_worktree import add_worktree_cmd
from grove.cli.commands.close import close_cmd, close_worktree_cmd
from grove.cli.commands.config import config_group
from grove.cli.commands.create import create_cmd
from grove.cli.commands.list_cmd import list_cmd
from grove.cli.commands.repo import repo_group
from grove.cli.commands.status import status_cmd
from grove.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


def _enable_debug_logging() -> None:
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="grove")
@click.option("--debug", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Create and tear down groves of git worktrees across repositories."""
    if debug or os.getenv("GROVE_DEBUG"):
        _enable_debug_logging()
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


cli.add_command(add_worktree_cmd)
cli.add_command(close_cmd)
cli.add_command(close_worktree_cmd)
cli.add_command(config_group)
cli.add_command(create_cmd)
cli.add_command(list_cmd)
cli.add_command(repo_group)
cli.add_command(status_cmd)


def main() -> None:
    """CLI entry point used by the `grove` console script."""
    cli()
