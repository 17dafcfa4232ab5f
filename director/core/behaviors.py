"""Enemy behaviors — a closed set, each with stat multipliers and a movement rule.

  - BASIC: chases the target at base speed.
  - FAST: double speed, and weaves side to side while chasing (zigzag).

All movement happens in one per-tick pass; each enemy carries its own zigzag
phase inline, so there are no per-entity timers to cancel on disposal.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum, unique
from typing import TYPE_CHECKING

from director.core.models import Vector3

if TYPE_CHECKING:
    from director.config import DirectorConfig
    from director.core.models import Bounds, EnemyEntity


@dataclass(frozen=True, slots=True)
class BehaviorDescriptor:
    label: str
    speed_mult: float = 1.0
    health_mult: float = 1.0
    damage_mult: float = 1.0
    zigzag: bool = False


@unique
class EnemyBehavior(IntEnum):
    BASIC = 0
    FAST = 1

    @property
    def descriptor(self) -> BehaviorDescriptor:
        return BEHAVIORS[self]

    @property
    def label(self) -> str:
        return BEHAVIORS[self].label


BEHAVIORS: dict[EnemyBehavior, BehaviorDescriptor] = {
    EnemyBehavior.BASIC: BehaviorDescriptor("basic"),
    EnemyBehavior.FAST: BehaviorDescriptor("fast", speed_mult=2.0, zigzag=True),
}


def classify(type_channel: float, threshold: float = 0.5) -> EnemyBehavior:
    """Map the predictor's type channel onto a behavior."""
    return EnemyBehavior.FAST if type_channel > threshold else EnemyBehavior.BASIC


def derive_stats(behavior: EnemyBehavior, level: int, config: DirectorConfig) -> tuple[int, float, int]:
    """Return (health, speed, damage) for an enemy of *behavior* at *level*."""
    desc = behavior.descriptor
    level = max(level, 1)
    health = int(round(config.health_per_level * level * desc.health_mult))
    speed = (config.speed_per_level * level + config.speed_base) * desc.speed_mult
    damage = int(round(config.damage_per_level * level * desc.damage_mult))
    return health, speed, damage


def step_enemy(
    enemy: EnemyEntity,
    dt: float,
    bounds: Bounds,
    config: DirectorConfig,
    target: Vector3 | None = None,
) -> Vector3:
    """Advance *enemy* by *dt* seconds and return its new, clamped position."""
    pos = enemy.pos
    if dt <= 0:
        return bounds.clamp(pos)

    # Unit heading on the ground plane; x axis when there is nothing to chase
    hx, hz = 1.0, 0.0
    if target is not None:
        dx = target.x - pos.x
        dz = target.z - pos.z
        dist = math.hypot(dx, dz)
        if dist > 1e-9:
            hx, hz = dx / dist, dz / dist
            travel = min(enemy.speed * dt * config.chase_scale, dist)
            pos = Vector3(pos.x + hx * travel, pos.y, pos.z + hz * travel)

    if enemy.behavior.descriptor.zigzag:
        enemy.zigzag_elapsed += dt
        while enemy.zigzag_elapsed >= config.zigzag_period:
            enemy.zigzag_elapsed -= config.zigzag_period
            enemy.zigzag_direction = -enemy.zigzag_direction
        lateral = enemy.zigzag_direction * enemy.speed * dt * config.zigzag_scale
        # Perpendicular to heading
        pos = Vector3(pos.x - hz * lateral, pos.y, pos.z + hx * lateral)

    return bounds.clamp(pos)
