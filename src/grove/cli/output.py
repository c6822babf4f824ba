"""Output utilities for CLI commands with clear intent.

- user_output: human-facing messages, written to stderr
- machine_output: structured results (JSON), written to stdout
"""

import threading
from collections.abc import Callable
from typing import TypeVar

import click
from rich.console import Console
from rich.table import Table

from grove.core.log_stream import CallbackLogSink, LogEvent, LogSink, QueueLogSink
from grove.core.types import GroveMetadata, GroveReference

T = TypeVar("T")

_LEVEL_COLORS = {
    "info": None,
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


def user_output(message: str = "") -> None:
    click.echo(message, err=True)


def machine_output(message: str) -> None:
    click.echo(message)


def format_error(message: str) -> str:
    return click.style("Error: ", fg="red") + message


def print_event(event: LogEvent) -> None:
    """Write a progress event to stderr, colored by level."""
    color = _LEVEL_COLORS[event.level]
    text = event.message if color is None else click.style(event.message, fg=color)
    user_output(f"  {text}")


def console_sink() -> LogSink:
    return CallbackLogSink(print_event)


def run_with_progress(operation: Callable[[LogSink], T]) -> T:
    """Run `operation` in a background thread, printing its events as they arrive.

    Events travel through a bounded QueueLogSink and are printed on the calling
    thread. An exception raised by the operation is re-raised here after every
    event it emitted has been printed.

    Args:
        operation: Receives the sink to report progress to
    """
    sink = QueueLogSink()
    result_holder: list[T] = []
    error_holder: list[Exception] = []

    def run() -> None:
        try:
            result_holder.append(operation(sink))
        except Exception as e:
            error_holder.append(e)
        finally:
            sink.close()

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    for event in sink.events():
        print_event(event)
    thread.join()

    if error_holder:
        raise error_holder[0]
    return result_holder[0]


def render_grove_table(groves: list[tuple[GroveReference, GroveMetadata | None]]) -> Table:
    """Table of groves with their open worktrees."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("name", no_wrap=True)
    table.add_column("path", no_wrap=True)
    table.add_column("created", no_wrap=True)
    table.add_column("updated", no_wrap=True)
    table.add_column("worktrees")

    for reference, metadata in groves:
        if metadata is None:
            worktrees = "[red]metadata missing[/red]"
        else:
            worktrees = "\n".join(
                f"{wt.repository_name}{'/' + wt.project_path if wt.project_path else ''} "
                f"[dim]({wt.branch})[/dim]"
                for wt in metadata.open_worktrees()
            ) or "[dim]none[/dim]"
        table.add_row(
            reference.id,
            reference.name,
            str(reference.path),
            reference.created_at[:19],
            reference.updated_at[:19],
            worktrees,
        )
    return table


def print_table(table: Table) -> None:
    console = Console(stderr=True, width=200, force_terminal=True)
    console.print(table)
    console.print()
