"""Domain-separated deterministic RNG using xxhash.

Formula: RNG_Value = Hash(WorldSeed, Domain, Key, Step)

Placement sampling and catalog picks draw from here, so a director built
with the same seed makes the same choices for the same call sequence.
"""

from __future__ import annotations

import struct

import xxhash

from director.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, key, step).
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    def _hash(self, domain: Domain, key: int, step: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, key, step)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, step: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, step) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, key: int, step: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, key, step)
        return low + int(f * (high - low + 1))

    def next_uniform(self, domain: Domain, key: int, step: int, low: float, high: float) -> float:
        """Return a deterministic float in [low, high)."""
        return low + self.next_float(domain, key, step) * (high - low)

    def next_bool(self, domain: Domain, key: int, step: int, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain, key, step) < probability
