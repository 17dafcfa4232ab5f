"""Core data models: Vector3, Bounds, EnemyEntity, StructureEntity."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from director.core.behaviors import EnemyBehavior
    from director.core.catalog import Footprint


@dataclass(frozen=True, slots=True)
class Vector3:
    """Immutable 3D world coordinate. y is up."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def planar_distance(self, other: Vector3) -> float:
        """Distance on the ground plane (x/z), ignoring height."""
        return math.hypot(self.x - other.x, self.z - other.z)

    def __repr__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"


@dataclass(frozen=True, slots=True)
class Bounds:
    """Axis-aligned rectangle on the ground plane."""

    min_x: float
    max_x: float
    min_z: float
    max_z: float
    floor_y: float = 0.0

    @classmethod
    def square(cls, half_extent: float, floor_y: float = 0.0) -> Bounds:
        return cls(-half_extent, half_extent, -half_extent, half_extent, floor_y)

    def contains(self, pos: Vector3) -> bool:
        return self.min_x <= pos.x <= self.max_x and self.min_z <= pos.z <= self.max_z

    def clamp(self, pos: Vector3) -> Vector3:
        return Vector3(
            min(max(pos.x, self.min_x), self.max_x),
            pos.y,
            min(max(pos.z, self.min_z), self.max_z),
        )


@dataclass(slots=True)
class EnemyEntity:
    """A live enemy. Owned by the lifecycle manager, referenced elsewhere by id."""

    id: int
    character_id: str
    handle: str                # Weak reference into the scene host
    pos: Vector3
    health: int
    max_health: int
    speed: float
    damage: int
    behavior: EnemyBehavior
    level: int = 1
    created_at: float = 0.0
    last_update: float = 0.0
    # Zigzag phase, only advanced for behaviors that zigzag
    zigzag_direction: int = 1
    zigzag_elapsed: float = 0.0

    @property
    def alive(self) -> bool:
        return self.health > 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "character_id": self.character_id,
            "x": self.pos.x,
            "y": self.pos.y,
            "z": self.pos.z,
            "health": self.health,
            "max_health": self.max_health,
            "speed": self.speed,
            "damage": self.damage,
            "behavior": self.behavior.label,
            "level": self.level,
        }


@dataclass(frozen=True, slots=True)
class StructureEntity:
    """A placed building. Immutable after placement."""

    id: int
    building_id: str
    handle: str
    pos: Vector3
    footprint: Footprint
    created_at: float = 0.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "building_id": self.building_id,
            "x": self.pos.x,
            "y": self.pos.y,
            "z": self.pos.z,
            "width": self.footprint.width,
            "depth": self.footprint.depth,
        }


@dataclass(slots=True)
class EntityIdAllocator:
    """Monotonic id source shared by enemies and structures."""

    next_id: int = field(default=1)

    def allocate(self) -> int:
        eid = self.next_id
        self.next_id += 1
        return eid
