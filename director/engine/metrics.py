"""Running inference and cache counters, read-only to the game loop."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    inference_count: int = 0
    avg_inference_ms: float = 0.0
    cache_hits: int = 0
    cache_misses: int = 0
    cache_evictions: int = 0
    last_updated: float = 0.0

    @property
    def cache_hit_rate(self) -> float:
        total = self.cache_hits + self.cache_misses
        return self.cache_hits / total if total else 0.0

    def to_dict(self) -> dict:
        return {
            "inference_count": self.inference_count,
            "avg_inference_ms": self.avg_inference_ms,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "cache_evictions": self.cache_evictions,
            "cache_hit_rate": self.cache_hit_rate,
            "last_updated": self.last_updated,
        }


class MetricsCollector:
    """Mutable counters. Only ``snapshot()`` copies ever leave this object."""

    __slots__ = ("_clock", "_count", "_avg_ms", "_hits", "_misses", "_evictions", "_last_updated")

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        self._count = 0
        self._avg_ms = 0.0
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._last_updated = 0.0

    def record_inference(self, elapsed_ms: float) -> None:
        self._count += 1
        n = self._count
        self._avg_ms = (self._avg_ms * (n - 1) + elapsed_ms) / n
        self._last_updated = self._clock()

    def record_hit(self) -> None:
        self._hits += 1
        self._last_updated = self._clock()

    def record_miss(self) -> None:
        self._misses += 1
        self._last_updated = self._clock()

    def record_eviction(self) -> None:
        self._evictions += 1

    def snapshot(self) -> MetricsSnapshot:
        return MetricsSnapshot(
            inference_count=self._count,
            avg_inference_ms=self._avg_ms,
            cache_hits=self._hits,
            cache_misses=self._misses,
            cache_evictions=self._evictions,
            last_updated=self._last_updated,
        )
