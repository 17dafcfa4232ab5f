"""Persistent model stores and the baseline training collaborator.

Stores are keyed by model name. The on-disk store keeps one ``.npz`` file per
predictor in a directory.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import numpy as np

from director.inference.predictors import DenseLayer, DensePredictor, Predictor

logger = logging.getLogger(__name__)


class InMemoryModelStore:
    """Dict-backed store. Loads raise ``KeyError`` for unknown names."""

    __slots__ = ("_models", "load_calls")

    def __init__(self, models: dict[str, Predictor] | None = None) -> None:
        self._models: dict[str, Predictor] = dict(models or {})
        self.load_calls: int = 0

    def load(self, name: str) -> Predictor:
        self.load_calls += 1
        try:
            return self._models[name]
        except KeyError:
            raise KeyError(f"No model named {name!r}") from None

    def save(self, name: str, model: Predictor) -> None:
        self._models[name] = model

    def __contains__(self, name: object) -> bool:
        return name in self._models


class NpzModelStore:
    """Directory of ``<name>.npz`` files, one dense predictor each."""

    __slots__ = ("_root",)

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _path(self, name: str) -> Path:
        return self._root / f"{name}.npz"

    def load(self, name: str) -> Predictor:
        path = self._path(name)
        if not path.exists():
            raise FileNotFoundError(f"Model file not found: {path}")
        with np.load(path, allow_pickle=False) as arrays:
            return DensePredictor.from_arrays(arrays)

    def save(self, name: str, model: Predictor) -> None:
        if not isinstance(model, DensePredictor):
            raise TypeError(f"NpzModelStore can only persist DensePredictor, got {type(model).__name__}")
        self._root.mkdir(parents=True, exist_ok=True)
        np.savez(self._path(name), **model.to_arrays())
        logger.info("Saved model %s to %s", name, self._path(name))


# ---------------------------------------------------------------------------
# Baseline predictors
# ---------------------------------------------------------------------------

def baseline_enemy_predictor() -> DensePredictor:
    """Linear rule: higher levels lean fast and spawn more, crowds spawn fewer.

    Outputs (type_score, spawn_count).
    """
    weights = np.array([
        [0.6, 1.5],    # level / 10
        [0.0, -1.0],   # enemy_count / 100
        [0.2, 0.5],    # map_density
    ])
    bias = np.array([0.1, 1.0])
    return DensePredictor([DenseLayer(weights, bias, "linear")])


def baseline_structure_predictor() -> DensePredictor:
    """Sigmoid rule: city centres favour larger buildings, placements drift with count.

    Outputs (building_index, x, z), each normalized to [0, 1].
    """
    weights = np.array([
        [1.0, 0.5, -0.5],   # level / 10
        [0.0, 8.0, -6.0],   # building_count / 100
        [1.2, 0.5, -0.8],   # region
    ])
    bias = np.array([-0.6, -1.5, 1.0])
    return DensePredictor([DenseLayer(weights, bias, "sigmoid")])


class BaselineTrainer:
    """Training collaborator that persists fixed baseline predictors.

    It does not fit anything; it gives a fresh install something to load.
    """

    __slots__ = ("_store", "_enemy_name", "_structure_name", "runs")

    def __init__(self, store, enemy_name: str, structure_name: str) -> None:
        self._store = store
        self._enemy_name = enemy_name
        self._structure_name = structure_name
        self.runs = 0

    async def train(self) -> None:
        self.runs += 1
        logger.info("Writing baseline predictors (%s, %s)", self._enemy_name, self._structure_name)
        await asyncio.to_thread(self._store.save, self._enemy_name, baseline_enemy_predictor())
        await asyncio.to_thread(self._store.save, self._structure_name, baseline_structure_predictor())
