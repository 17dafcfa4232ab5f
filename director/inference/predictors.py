"""Predictors: small dense networks evaluated with numpy.

The training collaborator produces these; the director only runs the
forward pass. Feature normalization must match what the predictors were
trained on:

  enemy:     (level / 10, enemy_count / 100, map_density)
  structure: (level / 10, building_count / 100, region)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from director.core.enums import Region

ACTIVATIONS = ("linear", "relu", "sigmoid", "softmax")


class Predictor(Protocol):
    """Anything that maps a feature vector to an output vector."""

    def predict(self, features: Sequence[float]) -> tuple[float, ...]: ...


@dataclass(frozen=True)
class DenseLayer:
    weights: np.ndarray        # (inputs, units)
    bias: np.ndarray           # (units,)
    activation: str = "linear"

    def __post_init__(self) -> None:
        if self.activation not in ACTIVATIONS:
            raise ValueError(f"Unknown activation {self.activation!r}")
        if self.weights.ndim != 2 or self.bias.shape != (self.weights.shape[1],):
            raise ValueError(
                f"Layer shape mismatch: weights {self.weights.shape}, bias {self.bias.shape}"
            )

    def forward(self, x: np.ndarray) -> np.ndarray:
        z = x @ self.weights + self.bias
        if self.activation == "relu":
            return np.maximum(z, 0.0)
        if self.activation == "sigmoid":
            return 1.0 / (1.0 + np.exp(-z))
        if self.activation == "softmax":
            e = np.exp(z - np.max(z))
            return e / e.sum()
        return z


class DensePredictor:
    """Feed-forward network: a stack of dense layers."""

    __slots__ = ("_layers",)

    def __init__(self, layers: list[DenseLayer]) -> None:
        if not layers:
            raise ValueError("DensePredictor needs at least one layer")
        for prev, nxt in zip(layers, layers[1:]):
            if prev.weights.shape[1] != nxt.weights.shape[0]:
                raise ValueError("Consecutive layers do not chain")
        self._layers = list(layers)

    @property
    def input_size(self) -> int:
        return self._layers[0].weights.shape[0]

    @property
    def output_size(self) -> int:
        return self._layers[-1].weights.shape[1]

    def predict(self, features: Sequence[float]) -> tuple[float, ...]:
        x = np.asarray(features, dtype=np.float64)
        if x.shape != (self.input_size,):
            raise ValueError(f"Expected {self.input_size} features, got {x.shape}")
        for layer in self._layers:
            x = layer.forward(x)
        return tuple(float(v) for v in x)

    def to_arrays(self) -> dict[str, np.ndarray]:
        """Flatten into named arrays for ``np.savez``."""
        arrays: dict[str, np.ndarray] = {
            "activations": np.array([layer.activation for layer in self._layers]),
        }
        for i, layer in enumerate(self._layers):
            arrays[f"w{i}"] = layer.weights
            arrays[f"b{i}"] = layer.bias
        return arrays

    @classmethod
    def from_arrays(cls, arrays) -> DensePredictor:
        activations = [str(a) for a in arrays["activations"]]
        layers = [
            DenseLayer(
                np.asarray(arrays[f"w{i}"], dtype=np.float64),
                np.asarray(arrays[f"b{i}"], dtype=np.float64),
                act,
            )
            for i, act in enumerate(activations)
        ]
        return cls(layers)


class ConstantPredictor:
    """Returns a fixed output regardless of input. Handy for tests and demos."""

    __slots__ = ("_output", "calls")

    def __init__(self, output: Sequence[float]) -> None:
        self._output = tuple(float(v) for v in output)
        self.calls = 0

    def predict(self, features: Sequence[float]) -> tuple[float, ...]:
        self.calls += 1
        return self._output


# ---------------------------------------------------------------------------
# Feature normalization
# ---------------------------------------------------------------------------

def enemy_features(level: int, enemy_count: int, map_density: float) -> tuple[float, float, float]:
    return (level / 10.0, enemy_count / 100.0, float(map_density))


def structure_features(level: int, building_count: int, region: Region) -> tuple[float, float, float]:
    return (level / 10.0, building_count / 100.0, float(int(region)))
