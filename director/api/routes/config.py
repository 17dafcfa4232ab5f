"""GET /api/v1/config — expose director configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from director.api.dependencies import get_engine_manager
from director.api.engine_manager import EngineManager
from director.api.schemas import DirectorConfigResponse

router = APIRouter()


@router.get("/config", response_model=DirectorConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> DirectorConfigResponse:
    cfg = manager.config
    return DirectorConfigResponse(
        world_seed=cfg.world_seed,
        world_half_extent=cfg.world_half_extent,
        cache_ttl_seconds=cfg.cache_ttl_seconds,
        cache_capacity=cfg.cache_capacity,
        cache_quantum=cfg.cache_quantum,
        planner_max_attempts=cfg.planner_max_attempts,
        max_enemies=cfg.max_enemies,
        max_spawn_per_call=cfg.max_spawn_per_call,
        prune_interval=cfg.prune_interval,
        enemy_spawn_chance=cfg.enemy_spawn_chance,
        structure_spawn_chance=cfg.structure_spawn_chance,
        tick_rate=manager.tick_rate,
    )
