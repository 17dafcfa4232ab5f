"""Spawn safety planner: rejection sampling for collision-free placement.

Sample a uniform point in the bounds, accept it if it keeps the minimum
separation from every existing position, otherwise resample. After the
attempt budget runs out the planner returns a fixed fallback point outside
the play-area perimeter, so callers always get a position.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from director.core.enums import Domain
from director.core.models import Vector3
from director.errors import PlanningExhausted

if TYPE_CHECKING:
    from director.config import DirectorConfig
    from director.core.catalog import Footprint
    from director.core.models import Bounds
    from director.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


class SpawnSafetyPlanner:
    """Finds positions that respect a minimum separation."""

    __slots__ = ("_rng", "_max_attempts", "_fallback_margin", "_clearance", "_calls")

    def __init__(
        self,
        rng: DeterministicRNG,
        max_attempts: int = 10,
        fallback_margin: float = 10.0,
        clearance: float = 2.0,
    ) -> None:
        self._rng = rng
        self._max_attempts = max(1, max_attempts)
        self._fallback_margin = fallback_margin
        self._clearance = clearance
        self._calls = 0

    @classmethod
    def from_config(cls, config: DirectorConfig, rng: DeterministicRNG) -> SpawnSafetyPlanner:
        return cls(
            rng,
            max_attempts=config.planner_max_attempts,
            fallback_margin=config.fallback_margin,
            clearance=config.structure_clearance,
        )

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @staticmethod
    def is_clear(candidate: Vector3, existing: Iterable[Vector3], min_separation: float) -> bool:
        return all(candidate.planar_distance(p) >= min_separation for p in existing)

    def structure_separation(self, footprint: Footprint) -> float:
        """Clearance a structure needs: larger buildings need proportionally more room."""
        return 3.0 * footprint.span + self._clearance

    def fallback_position(self, bounds: Bounds) -> Vector3:
        return Vector3(
            bounds.max_x + self._fallback_margin,
            bounds.floor_y,
            bounds.max_z + self._fallback_margin,
        )

    def sample(self, bounds: Bounds, key: int, attempt: int) -> Vector3:
        """The *attempt*-th candidate for call *key*."""
        x = self._rng.next_uniform(Domain.PLACEMENT, key, attempt * 2, bounds.min_x, bounds.max_x)
        z = self._rng.next_uniform(Domain.PLACEMENT, key, attempt * 2 + 1, bounds.min_z, bounds.max_z)
        return Vector3(x, bounds.floor_y, z)

    def next_key(self) -> int:
        key = self._calls
        self._calls += 1
        return key

    def find_safe_position(
        self,
        existing_positions: Iterable[Vector3],
        min_separation: float,
        bounds: Bounds,
        key: int | None = None,
    ) -> Vector3:
        existing = list(existing_positions)
        if key is None:
            key = self.next_key()
        for attempt in range(self._max_attempts):
            candidate = self.sample(bounds, key, attempt)
            if self.is_clear(candidate, existing, min_separation):
                return candidate
        exhausted = PlanningExhausted(self._max_attempts, len(existing), min_separation)
        logger.debug("%s, using fallback", exhausted)
        return self.fallback_position(bounds)
