"""Pydantic response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EnemySchema(BaseModel):
    id: int
    character_id: str
    x: float
    y: float
    z: float
    health: int
    max_health: int
    speed: float
    damage: int
    behavior: str
    level: int = 1


class StructureSchema(BaseModel):
    id: int
    building_id: str
    x: float
    y: float
    z: float
    width: float
    depth: float


class TaskSchema(BaseModel):
    task_id: int
    description: str
    target: int
    progress: int = 0
    reward: int = 0
    created_at: float = 0.0
    completed_at: float | None = None
    completed: bool = False


class MetricsSchema(BaseModel):
    inference_count: int = 0
    avg_inference_ms: float = 0.0
    cache_hits: int = 0
    cache_misses: int = 0
    cache_evictions: int = 0
    cache_hit_rate: float = 0.0
    last_updated: float = 0.0


class WorldStateResponse(BaseModel):
    frame: int
    sim_time: float
    score: int
    level: int
    kills: int
    model_state: str
    enemies: list[EnemySchema] = Field(default_factory=list)
    structures: list[StructureSchema] = Field(default_factory=list)
    task: TaskSchema | None = None
    metrics: MetricsSchema


class EventSchema(BaseModel):
    timestamp: float
    category: str
    message: str
    entity_ids: list[int] = Field(default_factory=list)


class ControlResponse(BaseModel):
    status: str
    message: str
    frame: int = 0
    model_state: str = "UNLOADED"


class DirectorConfigResponse(BaseModel):
    world_seed: int
    world_half_extent: float
    cache_ttl_seconds: float
    cache_capacity: int
    cache_quantum: float
    planner_max_attempts: int
    max_enemies: int
    max_spawn_per_call: int
    prune_interval: float
    enemy_spawn_chance: float
    structure_spawn_chance: float
    tick_rate: float
