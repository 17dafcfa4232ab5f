"""Director systems: RNG and spawn safety planning."""

from director.systems.rng import DeterministicRNG
from director.systems.planner import SpawnSafetyPlanner

__all__ = ["DeterministicRNG", "SpawnSafetyPlanner"]
