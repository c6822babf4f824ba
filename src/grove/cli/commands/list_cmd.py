"""List command: show registered groves."""

import json

import click

from grove.cli.output import machine_output, print_table, render_grove_table, user_output
from grove.core.context import GroveContext
from grove.core.registry import worktree_to_dict
from grove.core.types import GroveMetadata, GroveReference


def _groves_to_json(groves: list[tuple[GroveReference, GroveMetadata | None]]) -> str:
    return json.dumps(
        [
            {
                "id": reference.id,
                "name": reference.name,
                "path": str(reference.path),
                "createdAt": reference.created_at,
                "updatedAt": reference.updated_at,
                "worktrees": (
                    [worktree_to_dict(wt) for wt in metadata.open_worktrees()]
                    if metadata is not None
                    else None
                ),
            }
            for reference, metadata in groves
        ],
        indent=2,
    )


@click.command("list")
@click.option("--json", "output_json", is_flag=True, help="Print groves as JSON on stdout.")
@click.pass_obj
def list_cmd(ctx: GroveContext, output_json: bool) -> None:
    """List groves and their open worktrees."""
    groves = [(ref, ctx.registry.read_metadata(ref.path)) for ref in ctx.registry.list_groves()]

    if output_json:
        machine_output(_groves_to_json(groves))
        return

    if not groves:
        user_output("No groves found.")
        return

    print_table(render_grove_table(groves))
