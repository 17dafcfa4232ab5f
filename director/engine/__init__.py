"""Engine layer: lifecycle manager, metrics, the director facade, and the game loop."""

from director.engine.lifecycle import EntityLifecycleManager, PruneReport
from director.engine.metrics import MetricsCollector, MetricsSnapshot
from director.engine.director import Director
from director.engine.game_loop import GameLoop, SimClock

__all__ = [
    "Director",
    "EntityLifecycleManager",
    "GameLoop",
    "MetricsCollector",
    "MetricsSnapshot",
    "PruneReport",
    "SimClock",
]
