"""GET /api/v1/state, /metrics, /task, /events — live director data (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from director.api.dependencies import get_engine_manager
from director.api.engine_manager import EngineManager
from director.api.schemas import (
    EnemySchema,
    EventSchema,
    MetricsSchema,
    StructureSchema,
    TaskSchema,
    WorldStateResponse,
)

router = APIRouter()


def _require_snapshot(manager: EngineManager):
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Director not ready yet.")
    return snapshot


@router.get("/state", response_model=WorldStateResponse)
def get_state(
    manager: EngineManager = Depends(get_engine_manager),
) -> WorldStateResponse:
    snap = _require_snapshot(manager)
    return WorldStateResponse(
        frame=snap.frame,
        sim_time=snap.sim_time,
        score=snap.score,
        level=snap.level,
        kills=snap.kills,
        model_state=snap.model_state,
        enemies=[EnemySchema(**e) for e in snap.enemies],
        structures=[StructureSchema(**s) for s in snap.structures],
        task=TaskSchema(**snap.task.to_dict()) if snap.task else None,
        metrics=MetricsSchema(**snap.metrics.to_dict()),
    )


@router.get("/metrics", response_model=MetricsSchema)
def get_metrics(
    manager: EngineManager = Depends(get_engine_manager),
) -> MetricsSchema:
    snap = _require_snapshot(manager)
    return MetricsSchema(**snap.metrics.to_dict())


@router.get("/task", response_model=TaskSchema | None)
def get_task(
    manager: EngineManager = Depends(get_engine_manager),
) -> TaskSchema | None:
    snap = _require_snapshot(manager)
    return TaskSchema(**snap.task.to_dict()) if snap.task else None


@router.get("/events", response_model=list[EventSchema])
def get_events(
    limit: int = Query(50, ge=1, le=500),
    manager: EngineManager = Depends(get_engine_manager),
) -> list[EventSchema]:
    return [
        EventSchema(
            timestamp=e.timestamp, category=e.category,
            message=e.message, entity_ids=list(e.entity_ids),
        )
        for e in manager.event_log.latest(limit)
    ]
