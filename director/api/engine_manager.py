"""EngineManager — runs the GameLoop on a background thread.

The API reads from an atomically-swapped immutable LoopSnapshot; the loop
and the director are mutated exclusively on the engine thread.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import TYPE_CHECKING

from director.collaborators import EventLogNotifier
from director.engine.director import Director
from director.engine.game_loop import GameLoop, LoopSnapshot, SimClock
from director.inference.store import BaselineTrainer, NpzModelStore
from director.utils.event_log import EventLog

if TYPE_CHECKING:
    from director.collaborators import ModelStore
    from director.config import DirectorConfig

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages the game loop lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded ring buffer)
      - control commands (start / pause / resume / step / reset)
    """

    def __init__(self, config: DirectorConfig, store: ModelStore | None = None) -> None:
        self._config = config
        self.config = config
        self._store = store if store is not None else NpzModelStore(config.model_dir)
        self._tick_rate: float = config.frame_dt  # seconds between frames

        self._director: Director | None = None
        self._loop: GameLoop | None = None
        self._models_started = False

        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: LoopSnapshot | None = None
        self._event_log = EventLog()

        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.001, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    # -- snapshot access --

    def get_snapshot(self) -> LoopSnapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="director-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at frame %d", self._current_frame())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at frame %d", self._current_frame())

    def step(self) -> None:
        """Execute exactly one frame (must be paused)."""
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        if self._director:
            self._director.dispose()
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, rebuild, and leave ready to start."""
        self.stop()
        self._event_log.clear()
        self._build()
        logger.info("EngineManager reset.")

    # -- internals --

    def _build(self) -> None:
        cfg = self._config
        clock = SimClock()
        self._director = Director(
            cfg,
            store=self._store,
            trainer=BaselineTrainer(self._store, cfg.enemy_model_name, cfg.structure_model_name),
            notifier=EventLogNotifier(self._event_log, clock=clock),
            clock=clock,
        )
        self._loop = GameLoop(cfg, self._director, clock)
        self._models_started = False
        self._publish()

    def _publish(self) -> None:
        if self._loop is None:
            return
        snap = self._loop.snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _current_frame(self) -> int:
        snap = self.get_snapshot()
        return snap.frame if snap else 0

    def _ensure_models(self) -> None:
        # Runs on the engine thread, which has no event loop of its own
        if self._models_started or self._director is None:
            return
        self._models_started = True
        asyncio.run(self._director.start())
        self._publish()

    def _run_loop(self) -> None:
        try:
            self._ensure_models()
        except Exception:
            logger.exception("Model startup failed, continuing without AI population")

        while not self._stop_requested.is_set():
            if self._paused.is_set():
                if self._step_requested.is_set():
                    self._step_requested.clear()
                    self._do_frame()
                else:
                    time.sleep(0.01)
                continue

            t0 = time.perf_counter()
            if not self._do_frame():
                self._running.clear()
                break
            elapsed = time.perf_counter() - t0
            sleep_for = self._tick_rate - elapsed
            if sleep_for > 0:
                time.sleep(sleep_for)

    def _do_frame(self) -> bool:
        if self._loop is None:
            return False
        try:
            alive = self._loop.tick_once()
        except Exception:
            logger.exception("Frame %d failed", self._current_frame())
            alive = True
        self._publish()
        return alive
