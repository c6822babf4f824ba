"""Repository registration commands."""

from pathlib import Path

import click

from grove.cli.ensure import handle_grove_errors
from grove.cli.output import user_output
from grove.core.context import GroveContext

_PATH = click.Path(exists=True, file_okay=False, path_type=Path)


@click.group("repo")
def repo_group() -> None:
    """Manage registered repositories."""


@repo_group.command("register")
@click.argument("path", type=_PATH, default=".")
@click.option("--monorepo", is_flag=True, help="Allow selecting sub-projects of this repository.")
@click.pass_obj
@handle_grove_errors
def register_cmd(ctx: GroveContext, path: Path, monorepo: bool) -> None:
    """Register the git repository at PATH (default: current directory)."""
    repo = ctx.repositories.register(path, is_monorepo=monorepo)
    suffix = " (monorepo)" if repo.is_monorepo else ""
    user_output(f"Registered {click.style(repo.name, fg='cyan')}{suffix} at {repo.path}")


@repo_group.command("list")
@click.pass_obj
def list_repos_cmd(ctx: GroveContext) -> None:
    """List registered repositories."""
    repositories = ctx.repositories.list_repositories()
    if not repositories:
        user_output("No repositories registered.")
        return
    for repo in repositories:
        suffix = click.style(" [monorepo]", fg="bright_black") if repo.is_monorepo else ""
        user_output(f"{click.style(repo.name, fg='cyan')}{suffix}  {repo.path}")


@repo_group.command("remove")
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
@handle_grove_errors
def remove_repo_cmd(ctx: GroveContext, path: Path) -> None:
    """Unregister the repository at PATH. Existing groves are left alone."""
    resolved = path.expanduser().resolve()
    ctx.repositories.remove(resolved)
    user_output(f"Unregistered {resolved}")


@repo_group.command("monorepo")
@click.argument("path", type=_PATH)
@click.option("--off", is_flag=True, help="Stop treating the repository as a monorepo.")
@click.pass_obj
@handle_grove_errors
def monorepo_cmd(ctx: GroveContext, path: Path, off: bool) -> None:
    """Mark the repository at PATH as a monorepo (or not, with --off)."""
    repo = ctx.repositories.set_monorepo(path.expanduser().resolve(), not off)
    state = "a monorepo" if repo.is_monorepo else "not a monorepo"
    user_output(f"{repo.name} is now {state}")
