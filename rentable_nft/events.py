import logging
from contextlib import contextmanager
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventLog:
    """Ordered, append-only record of the events emitted by successful calls.

    Inside ``deferred()`` subscribers are only called once the outermost block
    exits without an error, so they never see events from a call that is rolled
    back. Outside it they are called as each event is emitted. A subscriber that
    raises fails the call it is delivered for.
    """

    def __init__(self):
        self._events: list[Any] = []
        self._subscribers: list[Callable[[Any], None]] = []
        self._deferred_depth = 0
        self._pending: list[Any] = []

    def emit(self, event):
        logger.debug(f"emit {event=}")
        self._events.append(event)
        if self._deferred_depth:
            self._pending.append(event)
        else:
            self._deliver([event])

    def subscribe(self, callback: Callable[[Any], None]):
        self._subscribers.append(callback)

    @contextmanager
    def deferred(self):
        self._deferred_depth += 1
        try:
            yield
        except Exception:
            if self._deferred_depth == 1:
                self._pending = []
            raise
        finally:
            self._deferred_depth -= 1
        if self._deferred_depth == 0:
            pending, self._pending = self._pending, []
            self._deliver(pending)

    def _deliver(self, events: list):
        for event in events:
            for callback in self._subscribers:
                callback(event)

    def get_logs(self, name: str | None = None) -> list:
        return [e for e in self._events if name is None or type(e).__name__ == name]

    def get_last_event(self, name: str | None = None):
        matching_events = self.get_logs(name)
        if not matching_events:
            raise LookupError(f"No events named {name}" if name else "No events emitted")
        return matching_events[-1]

    def snapshot(self) -> int:
        return len(self._events)

    def restore(self, snapshot: int):
        del self._events[snapshot:]

    def __len__(self):
        return len(self._events)
