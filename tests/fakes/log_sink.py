"""Log sink that records events for assertions."""

from grove.core.log_stream import LogEvent, LogSink


class RecordingLogSink(LogSink):
    """Collects every emitted event in order."""

    def __init__(self) -> None:
        self._events: list[LogEvent] = []

    def emit(self, event: LogEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[LogEvent]:
        return self._events.copy()

    @property
    def messages(self) -> list[str]:
        return [event.message for event in self._events]
