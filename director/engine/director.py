"""Director — the procedural-population facade handed to the game loop.

Wires the model host, inference cache, safety planner, lifecycle manager,
task director and metrics together. All collaborators are injected.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from director.collaborators import EventLogNotifier, LoggingErrorReporter, RecordingScene
from director.config import DirectorConfig
from director.core.catalog import StaticCatalog
from director.core.enums import ModelState, Region, Severity, TaskState
from director.core.tasks import TaskDirector
from director.engine.lifecycle import EntityLifecycleManager, PruneReport
from director.engine.metrics import MetricsCollector, MetricsSnapshot
from director.inference.cache import InferenceCache
from director.inference.model_host import ModelHost
from director.systems.planner import SpawnSafetyPlanner
from director.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    from director.collaborators import (
        CatalogProvider, ErrorReporter, ModelStore, Notifier, SceneGraphHost, Trainer,
    )
    from director.core.models import EnemyEntity, StructureEntity, Vector3
    from director.core.tasks import Task

logger = logging.getLogger(__name__)


def parse_region(region: Region | str | int) -> Region:
    """Accept a Region, its name (``"city_center"``) or its value."""
    if isinstance(region, Region):
        return region
    if isinstance(region, str):
        return Region[region.strip().upper()]
    return Region(int(region))


class Director:
    """Decides what to spawn, where, and when."""

    def __init__(
        self,
        config: DirectorConfig | None = None,
        *,
        store: ModelStore,
        trainer: Trainer | None = None,
        catalog: CatalogProvider | None = None,
        scene: SceneGraphHost | None = None,
        reporter: ErrorReporter | None = None,
        notifier: Notifier | None = None,
        clock: Callable[[], float] = time.monotonic,
        rng: DeterministicRNG | None = None,
    ) -> None:
        self._config = config if config is not None else DirectorConfig()
        self._clock = clock
        self._reporter = reporter if reporter is not None else LoggingErrorReporter()
        self._notifier = notifier if notifier is not None else EventLogNotifier(clock=clock)
        self._scene = scene if scene is not None else RecordingScene()
        self._catalog = catalog if catalog is not None else StaticCatalog()
        if rng is None:
            rng = DeterministicRNG(self._config.world_seed)

        self._metrics = MetricsCollector(clock)
        self._host = ModelHost.from_config(self._config, store, trainer, self._reporter, self._notifier)
        self._cache = InferenceCache.from_config(self._config, self._host, self._metrics, clock)
        self._planner = SpawnSafetyPlanner.from_config(self._config, rng)
        self._lifecycle = EntityLifecycleManager(
            self._config, self._cache, self._planner, self._catalog,
            self._scene, self._reporter, rng, clock,
        )
        self._tasks = TaskDirector.from_config(self._config, clock)

    # -- components --

    @property
    def config(self) -> DirectorConfig:
        return self._config

    @property
    def model_state(self) -> ModelState:
        return self._host.state

    @property
    def ready(self) -> bool:
        return self._host.ready

    @property
    def cache(self) -> InferenceCache:
        return self._cache

    @property
    def planner(self) -> SpawnSafetyPlanner:
        return self._planner

    @property
    def lifecycle(self) -> EntityLifecycleManager:
        return self._lifecycle

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    # -- startup --

    async def start(self) -> bool:
        """Load (or train, then load) the predictors. Never raises."""
        try:
            return await self._host.ensure_models_ready()
        except Exception as exc:
            self._report(exc, "start")
            return False

    # -- population --

    def spawn_enemies(self, level: int, count: int, density: float) -> list[EnemyEntity]:
        if not self._host.ready:
            return []
        self._maintain()
        try:
            return self._lifecycle.spawn_enemies(level, count, density)
        except Exception as exc:
            self._report(exc, "spawn_enemies")
            return []

    def place_structure(self, level: int, count: int, region: Region | str | int = Region.SUBURB) -> StructureEntity | None:
        if not self._host.ready:
            return None
        try:
            parsed = parse_region(region)
        except (KeyError, ValueError) as exc:
            self._report(exc, "place_structure")
            return None
        self._maintain()
        try:
            return self._lifecycle.place_structure(level, count, parsed)
        except Exception as exc:
            self._report(exc, "place_structure")
            return None

    def map_density(self) -> float:
        """Share of the density ceiling already covered by structures."""
        return min(len(self._lifecycle.structures) / self._config.max_structure_density_count, 1.0)

    def apply_damage(self, enemy_id: int, amount: int) -> int | None:
        return self._lifecycle.apply_damage(enemy_id, amount)

    def tick(self, now: float | None = None, target: Vector3 | None = None) -> PruneReport | None:
        """Per-frame update: maintenance first, then movement."""
        if now is None:
            now = self._clock()
        try:
            report = self._lifecycle.maintain(now)
            self._lifecycle.advance(now, target)
        except Exception as exc:
            self._report(exc, "tick")
            return None
        return report

    def prune_expired(self) -> PruneReport:
        try:
            return self._lifecycle.prune_expired()
        except Exception as exc:
            self._report(exc, "prune_expired")
            return PruneReport()

    def _maintain(self) -> PruneReport | None:
        try:
            return self._lifecycle.maintain()
        except Exception as exc:
            self._report(exc, "maintain")
            return None

    # -- tasks --

    def generate_task(self, level: int) -> Task | None:
        try:
            return self._tasks.generate_task(level)
        except Exception as exc:
            self._report(exc, "generate_task")
            return None

    def record_progress(self, did_advance: bool) -> bool:
        try:
            completed = self._tasks.record_progress(did_advance)
        except Exception as exc:
            self._report(exc, "record_progress")
            return False
        if completed:
            task = self._tasks.current_task
            self._notify(f"Task complete: {task.description} (+{task.reward})", Severity.SUCCESS)
        return completed

    def on_level_up(self, level: int) -> list[EnemyEntity]:
        """New level: fresh task, a notification and a spawn wave."""
        self._notify(f"Level {level}!", Severity.SUCCESS)
        self.generate_task(level)
        return self.spawn_enemies(level, len(self._lifecycle.enemies), self.map_density())

    # -- queries --

    def get_enemies(self) -> list[EnemyEntity]:
        return self._lifecycle.enemies

    def get_structures(self) -> list[StructureEntity]:
        return self._lifecycle.structures

    def get_current_task(self) -> Task | None:
        return self._tasks.current_task

    def get_task_state(self) -> TaskState:
        return self._tasks.state

    def get_metrics(self) -> MetricsSnapshot:
        return self._metrics.snapshot()

    # -- failure boundary --

    def _report(self, exc: Exception, context: str) -> None:
        try:
            self._reporter.report(exc, context)
        except Exception:
            logger.exception("Error reporter failed while handling %s: %s", context, exc)

    def _notify(self, message: str, severity: Severity) -> None:
        try:
            self._notifier.notify(message, severity)
        except Exception as exc:
            self._report(exc, "notify")

    # -- teardown --

    def dispose(self) -> None:
        """Release scene handles and models. Safe to call more than once."""
        try:
            self._lifecycle.dispose()
        except Exception as exc:
            self._report(exc, "dispose")
        self._cache.clear()
        self._host.dispose()
        self._tasks.reset()
        logger.info("Director disposed.")
