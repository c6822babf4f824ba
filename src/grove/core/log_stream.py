"""Progress events emitted while groves are created or closed.

Orchestrator functions report progress as LogEvent values delivered to a
LogSink, synchronously and in order, on the calling thread. QueueLogSink
hands them to a consumer on another thread through a bounded queue.
"""

import queue
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Literal

LogLevel = Literal["info", "success", "warning", "error"]


@dataclass(frozen=True)
class LogEvent:
    """A single progress message.

    Attributes:
        message: Human-readable text
        level: Severity used for presentation
        source: Worktree folder name the event concerns, if any
    """

    message: str
    level: LogLevel = "info"
    source: str | None = None


class LogSink(ABC):
    """Receives progress events."""

    @abstractmethod
    def emit(self, event: LogEvent) -> None: ...


class NullLogSink(LogSink):
    """Discards every event."""

    def emit(self, event: LogEvent) -> None:
        pass


class CallbackLogSink(LogSink):
    """Forwards every event to a callable."""

    def __init__(self, callback: Callable[[LogEvent], None]) -> None:
        self._callback = callback

    def emit(self, event: LogEvent) -> None:
        self._callback(event)


class QueueLogSink(LogSink):
    """Buffers events in a bounded queue for a consumer on another thread.

    `emit` blocks while the queue is full. The producer calls `close` when the
    operation finishes; `events` then stops after yielding everything queued.
    """

    _CLOSED = object()

    def __init__(self, maxsize: int = 256) -> None:
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize)

    def emit(self, event: LogEvent) -> None:
        self._queue.put(event)

    def close(self) -> None:
        self._queue.put(self._CLOSED)

    def events(self) -> Iterator[LogEvent]:
        while True:
            item = self._queue.get()
            if item is self._CLOSED:
                return
            assert isinstance(item, LogEvent)
            yield item
