"""POST /api/v1/control/{action}: drive the game loop that hosts the director.

Every response carries the frame and the model state seen right after the
action, so a client can tell "paused with population" from "paused while
models are still loading".
"""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from director.api.dependencies import get_engine_manager
from director.api.engine_manager import EngineManager
from director.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _respond(manager: EngineManager, status: str, message: str) -> ControlResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        return ControlResponse(status=status, message=message)
    return ControlResponse(
        status=status, message=message,
        frame=snapshot.frame, model_state=snapshot.model_state,
    )


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    match action:
        case ControlAction.start:
            if manager.running:
                return _respond(manager, "noop", "Director already running.")
            manager.start()
            return _respond(manager, "ok", "Director started; models load on the loop thread.")

        case ControlAction.pause:
            if not manager.running:
                return _respond(manager, "error", "Director is not running.")
            manager.pause()
            return _respond(manager, "ok", "Spawning and movement paused.")

        case ControlAction.resume:
            if not manager.running:
                return _respond(manager, "error", "Director is not running.")
            manager.resume()
            return _respond(manager, "ok", "Spawning and movement resumed.")

        case ControlAction.step:
            if not manager.running:
                manager.start()
                manager.pause()
            manager.step()
            return _respond(manager, "ok", "One frame queued.")

        case ControlAction.reset:
            manager.reset()
            return _respond(manager, "ok", "Population disposed and director rebuilt.")


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    fps: float = Query(60.0, gt=0.5, le=1000.0, description="Frames per second"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.tick_rate = 1.0 / fps
    effective = 1.0 / manager.tick_rate
    return _respond(manager, "ok", f"Frame budget {manager.tick_rate * 1000.0:.1f} ms ({effective:.1f} fps).")
