"""Inference cache: TTL entries keyed by a quantized request signature.

Spawn decisions repeat with near-identical inputs inside short windows, so
requests are rounded to a coarse grid and served from cache while fresh.
Eviction is insertion-order (drop the single oldest entry), not LRU.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

from director.core.enums import ModelKind

if TYPE_CHECKING:
    from director.config import DirectorConfig
    from director.engine.metrics import MetricsCollector
    from director.inference.model_host import ModelHost

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CacheEntry:
    signature: str
    output: tuple[float, ...]
    inserted_at: float


def quantize(value: float, quantum: float) -> float:
    if quantum <= 0:
        return float(value)
    # + 0.0 folds -0.0 into 0.0 so both share a signature
    return round(round(value / quantum) * quantum, 6) + 0.0


class InferenceCache:
    """Wraps ``ModelHost.infer`` with a bounded TTL cache."""

    __slots__ = ("_host", "_metrics", "_clock", "_ttl", "_capacity", "_quantum", "_entries")

    def __init__(
        self,
        host: ModelHost,
        metrics: MetricsCollector,
        clock: Callable[[], float] = time.monotonic,
        ttl: float = 5.0,
        capacity: int = 100,
        quantum: float = 0.05,
    ) -> None:
        self._host = host
        self._metrics = metrics
        self._clock = clock
        self._ttl = ttl
        self._capacity = max(1, capacity)
        self._quantum = quantum
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @classmethod
    def from_config(
        cls,
        config: DirectorConfig,
        host: ModelHost,
        metrics: MetricsCollector,
        clock: Callable[[], float] = time.monotonic,
    ) -> InferenceCache:
        return cls(
            host, metrics, clock,
            ttl=config.cache_ttl_seconds,
            capacity=config.cache_capacity,
            quantum=config.cache_quantum,
        )

    def quantize_features(self, features: Sequence[float]) -> tuple[float, ...]:
        return tuple(quantize(v, self._quantum) for v in features)

    @staticmethod
    def _join(kind: ModelKind, quantized: Sequence[float]) -> str:
        return "|".join([kind.value, *(f"{v:.4f}" for v in quantized)])

    def signature(self, kind: ModelKind, features: Sequence[float]) -> str:
        return self._join(kind, self.quantize_features(features))

    def is_expired(self, entry: CacheEntry, now: float | None = None) -> bool:
        if now is None:
            now = self._clock()
        return now - entry.inserted_at >= self._ttl

    def predict(self, kind: ModelKind, features: Sequence[float]) -> tuple[float, ...]:
        quantized = self.quantize_features(features)
        sig = self._join(kind, quantized)
        now = self._clock()

        entry = self._entries.get(sig)
        if entry is not None and not self.is_expired(entry, now):
            self._metrics.record_hit()
            return entry.output

        start = time.perf_counter()
        output = self._host.infer(kind, quantized)
        self._metrics.record_inference((time.perf_counter() - start) * 1000.0)
        self._metrics.record_miss()

        # A stale entry is replaced and moves to the newest position
        self._entries.pop(sig, None)
        self._entries[sig] = CacheEntry(sig, tuple(output), now)
        while len(self._entries) > self._capacity:
            evicted, _ = self._entries.popitem(last=False)
            self._metrics.record_eviction()
            logger.debug("Evicted cache entry %s", evicted)
        return tuple(output)

    def purge_expired(self, now: float | None = None) -> int:
        """Delete every expired entry. Returns how many were removed."""
        if now is None:
            now = self._clock()
        stale = [sig for sig, e in self._entries.items() if self.is_expired(e, now)]
        for sig in stale:
            del self._entries[sig]
        return len(stale)

    def entries(self) -> list[CacheEntry]:
        """Entries oldest-first."""
        return list(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, signature: object) -> bool:
        return signature in self._entries
