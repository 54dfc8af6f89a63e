import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        ...


class SystemClock:
    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to, for tests and simulations."""

    def __init__(self, timestamp: int | None = None):
        self.timestamp = int(time.time()) if timestamp is None else timestamp

    def now(self) -> int:
        return self.timestamp

    def time_travel(self, seconds: int | None = None, timestamp: int | None = None):
        if (seconds is None) == (timestamp is None):
            raise ValueError("time_travel takes exactly one of seconds or timestamp")
        if timestamp is not None:
            self.timestamp = timestamp
        else:
            self.timestamp += seconds

    def __repr__(self):
        return f"ManualClock(timestamp={self.timestamp})"
