"""GameLoop — a headless owning loop that drives the director frame by frame.

Frame cycle:
  1. Advance the simulation clock
  2. Director tick (prune when due, then movement)
  3. Probabilistic spawn / placement requests
  4. Player combat, task progress, level-ups
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from director.core.enums import Domain, Region, Severity
from director.core.models import Vector3
from director.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    from director.config import DirectorConfig
    from director.core.tasks import Task
    from director.engine.director import Director
    from director.engine.metrics import MetricsSnapshot

logger = logging.getLogger(__name__)


class SimClock:
    """Manually advanced simulation clock, callable like ``time.monotonic``."""

    __slots__ = ("now",)

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def advance(self, dt: float) -> float:
        self.now += dt
        return self.now

    def __call__(self) -> float:
        return self.now


@dataclass(frozen=True, slots=True)
class LoopSnapshot:
    """Read-only copy of the loop and director state, safe to hand across threads."""

    frame: int
    sim_time: float
    score: int
    level: int
    kills: int
    model_state: str
    enemies: tuple[dict, ...]
    structures: tuple[dict, ...]
    task: Task | None
    metrics: MetricsSnapshot


class GameLoop:
    """Owns the player-side state the director reacts to."""

    __slots__ = (
        "_config", "_director", "_clock", "_rng", "player_pos",
        "frame", "score", "level", "kills",
    )

    def __init__(
        self,
        config: DirectorConfig,
        director: Director,
        clock: SimClock,
        rng: DeterministicRNG | None = None,
    ) -> None:
        self._config = config
        self._director = director
        self._clock = clock
        self._rng = rng if rng is not None else DeterministicRNG(config.world_seed)
        self.player_pos = Vector3(0.0, 0.0, 0.0)
        self.frame = 0
        self.score = 0
        self.level = 1
        self.kills = 0

    @property
    def director(self) -> Director:
        return self._director

    @property
    def clock(self) -> SimClock:
        return self._clock

    def tick_once(self) -> bool:
        """Execute a single frame. Returns False when the frame budget is spent."""
        if self.frame >= self._config.max_frames:
            logger.info("Frame %d: max frames reached.", self.frame)
            return False

        now = self._clock.advance(self._config.frame_dt)
        director = self._director
        director.tick(now, target=self.player_pos)

        # Scheduling rolls are keyed by frame, separate from placement draws
        frame = self.frame
        if self._rng.next_float(Domain.SCHEDULE, frame, 0) < self._config.enemy_spawn_chance:
            director.spawn_enemies(self.level, len(director.get_enemies()), director.map_density())
        if self._rng.next_float(Domain.SCHEDULE, frame, 1) < self._config.structure_spawn_chance:
            region = Region.CITY_CENTER if self._rng.next_bool(Domain.SCHEDULE, frame, 2) else Region.SUBURB
            director.place_structure(self.level, len(director.get_structures()), region)
        if director.get_current_task() is None:
            director.generate_task(self.level)

        self._fight()
        self._update_level()
        self.frame += 1
        return True

    def _fight(self) -> None:
        """The player hits the nearest enemy within range."""
        in_range = [
            e for e in self._director.get_enemies()
            if e.alive and e.pos.planar_distance(self.player_pos) <= self._config.player_attack_range
        ]
        if not in_range:
            return
        target = min(in_range, key=lambda e: e.pos.planar_distance(self.player_pos))
        remaining = self._director.apply_damage(target.id, self._config.player_damage_per_frame)
        if remaining != 0:
            return

        self.kills += 1
        self.score += self._config.score_per_kill
        if self._director.record_progress(True):
            task = self._director.get_current_task()
            self.score += task.reward
            self._director.generate_task(self.level)

    def _update_level(self) -> None:
        new_level = self.score // self._config.score_per_level + 1
        if new_level > self.level:
            self.level = new_level
            self._director.on_level_up(new_level)

    def snapshot(self) -> LoopSnapshot:
        director = self._director
        return LoopSnapshot(
            frame=self.frame,
            sim_time=self._clock.now,
            score=self.score,
            level=self.level,
            kills=self.kills,
            model_state=director.model_state.name,
            enemies=tuple(e.to_dict() for e in director.get_enemies()),
            structures=tuple(s.to_dict() for s in director.get_structures()),
            task=director.get_current_task(),
            metrics=director.get_metrics(),
        )

    def run(self) -> None:
        """Run until the frame budget is spent."""
        logger.info("=== Game loop started (seed=%d) ===", self._config.world_seed)
        while self.tick_once():
            if self.frame % 600 == 0:
                m = self._director.get_metrics()
                logger.info(
                    "Frame %d | level %d | score %d | enemies %d | structures %d | cache %d/%d",
                    self.frame, self.level, self.score,
                    len(self._director.get_enemies()), len(self._director.get_structures()),
                    m.cache_hits, m.cache_misses,
                )
        self._director.notifier.notify(
            f"Session over at level {self.level} with score {self.score}", Severity.INFO,
        )
        logger.info("=== Game loop finished: %d frames, %d kills ===", self.frame, self.kills)
