"""Model host — loads the two predictors, trains once if they are missing.

Loading is the only asynchronous part of the director. Both predictors load
concurrently; if either fails the training collaborator runs to completion
and both loads are retried exactly once. A second failure leaves the host
UNAVAILABLE and the director quietly stops spawning.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Sequence

from director.core.enums import ModelKind, ModelState, Severity
from director.errors import ModelUnavailableError

if TYPE_CHECKING:
    from director.collaborators import ErrorReporter, ModelStore, Notifier, Trainer
    from director.config import DirectorConfig
    from director.inference.predictors import Predictor

logger = logging.getLogger(__name__)


class ModelHost:
    """Holds the loaded predictors for the lifetime of the director."""

    __slots__ = (
        "_store", "_trainer", "_reporter", "_notifier", "_names",
        "_models", "_state", "_generation", "_lock",
    )

    def __init__(
        self,
        store: ModelStore,
        trainer: Trainer | None,
        reporter: ErrorReporter,
        notifier: Notifier,
        enemy_model_name: str = "enemy-selection-model",
        structure_model_name: str = "structure-placement-model",
    ) -> None:
        self._store = store
        self._trainer = trainer
        self._reporter = reporter
        self._notifier = notifier
        self._names: dict[ModelKind, str] = {
            ModelKind.ENEMY: enemy_model_name,
            ModelKind.STRUCTURE: structure_model_name,
        }
        self._models: dict[ModelKind, Predictor] = {}
        self._state = ModelState.UNLOADED
        self._generation = 0
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        config: DirectorConfig,
        store: ModelStore,
        trainer: Trainer | None,
        reporter: ErrorReporter,
        notifier: Notifier,
    ) -> ModelHost:
        return cls(
            store, trainer, reporter, notifier,
            enemy_model_name=config.enemy_model_name,
            structure_model_name=config.structure_model_name,
        )

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._state == ModelState.READY

    # -- loading --

    async def ensure_models_ready(self) -> bool:
        """Load both predictors. Safe to call repeatedly; never raises."""
        if self._state in (ModelState.READY, ModelState.UNAVAILABLE, ModelState.DISPOSED):
            return self.ready

        async with self._lock:
            # Another caller may have finished while we waited
            if self._state != ModelState.UNLOADED:
                return self.ready

            self._state = ModelState.LOADING
            generation = self._generation

            models, failed = await self._load_all()
            if failed:
                logger.warning("Models missing (%s), invoking training", ", ".join(failed))
                await self._train()
                models, failed = await self._load_all()

            if generation != self._generation:
                logger.info("Model load finished after dispose, discarding result")
                return False

            if failed:
                self._state = ModelState.UNAVAILABLE
                error = ModelUnavailableError(failed)
                logger.error("%s; AI spawning disabled for this session", error)
                self._reporter.report(error, "ensure_models_ready")
                self._notifier.notify(
                    "AI models could not be loaded; world population is paused.",
                    Severity.WARNING,
                )
                return False

            self._models = models
            self._state = ModelState.READY
            logger.info("Models ready: %s", ", ".join(self._names.values()))
            return True

    async def _load_all(self) -> tuple[dict[ModelKind, Predictor], list[str]]:
        kinds = list(self._names)
        results = await asyncio.gather(
            *(asyncio.to_thread(self._store.load, self._names[k]) for k in kinds),
            return_exceptions=True,
        )
        models: dict[ModelKind, Predictor] = {}
        failed: list[str] = []
        for kind, result in zip(kinds, results):
            if isinstance(result, Exception):
                logger.debug("Loading %s failed: %s", self._names[kind], result)
                failed.append(self._names[kind])
            else:
                models[kind] = result
        return models, failed

    async def _train(self) -> None:
        if self._trainer is None:
            return
        self._notifier.notify("Training AI models...", Severity.INFO)
        try:
            await self._trainer.train()
        except Exception as exc:
            self._reporter.report(exc, "train")
        else:
            self._notifier.notify("AI models trained.", Severity.SUCCESS)

    # -- inference --

    def infer(self, kind: ModelKind, features: Sequence[float]) -> tuple[float, ...]:
        if self._state != ModelState.READY:
            raise ModelUnavailableError([self._names[kind]], f"{self._names[kind]} is not loaded")
        return tuple(self._models[kind].predict(features))

    def dispose(self) -> None:
        self._generation += 1
        self._models.clear()
        self._state = ModelState.DISPOSED
