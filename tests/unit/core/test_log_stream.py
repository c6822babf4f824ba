"""Tests for progress event sinks."""

import threading
from pathlib import Path

from grove.core.context import GroveContext
from grove.core.lifecycle import create_grove
from grove.core.log_stream import CallbackLogSink, LogEvent, QueueLogSink
from grove.core.types import RepositorySelection
from tests.test_utils.repos import make_repo, register_repo


def test_callback_sink_forwards_events() -> None:
    received: list[LogEvent] = []
    sink = CallbackLogSink(received.append)

    sink.emit(LogEvent("hello"))
    sink.emit(LogEvent("bye", level="success", source="api.worktree"))

    assert [e.message for e in received] == ["hello", "bye"]
    assert received[1].source == "api.worktree"


def test_queue_sink_yields_until_closed() -> None:
    sink = QueueLogSink(maxsize=4)
    sink.emit(LogEvent("one"))
    sink.emit(LogEvent("two"))
    sink.close()

    assert [e.message for e in sink.events()] == ["one", "two"]


def test_queue_sink_streams_creation_to_another_thread(tmp_path: Path) -> None:
    """A consumer thread sees creation progress in order while it runs."""
    ctx = GroveContext.for_test(tmp_path)
    api = register_repo(ctx, make_repo(tmp_path / "src", "api"))
    sink = QueueLogSink(maxsize=1)
    received: list[LogEvent] = []

    consumer = threading.Thread(target=lambda: received.extend(sink.events()))
    consumer.start()
    try:
        create_grove(ctx, "Streamed", [RepositorySelection(repository=api)], sink=sink)
    finally:
        sink.close()
    consumer.join(timeout=10)

    assert not consumer.is_alive()
    assert received[0].message.startswith("Created grove Streamed")
    assert any(e.source == "api.worktree" for e in received)
