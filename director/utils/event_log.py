"""Thread-safe ring buffer for director events exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SimEvent:
    """A single event for the API event feed."""

    timestamp: float
    category: str
    message: str
    entity_ids: tuple[int, ...] = ()


class EventLog:
    """Bounded event log. Writers append; readers snapshot a slice.

    Thread-safe via a simple lock: the game loop writes, API threads read
    copies.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, maxlen: int = 500) -> None:
        self._buffer: deque[SimEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def append(self, event: SimEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def since(self, timestamp: float) -> list[SimEvent]:
        """Return all events with timestamp >= *timestamp*."""
        with self._lock:
            return [e for e in self._buffer if e.timestamp >= timestamp]

    def latest(self, count: int = 50) -> list[SimEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
