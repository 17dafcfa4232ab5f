"""Inference layer: predictors, model stores, model host, and the TTL cache."""

from director.inference.cache import CacheEntry, InferenceCache
from director.inference.model_host import ModelHost
from director.inference.predictors import ConstantPredictor, DensePredictor, Predictor
from director.inference.store import BaselineTrainer, InMemoryModelStore, NpzModelStore

__all__ = [
    "BaselineTrainer",
    "CacheEntry",
    "ConstantPredictor",
    "DensePredictor",
    "InMemoryModelStore",
    "InferenceCache",
    "ModelHost",
    "NpzModelStore",
    "Predictor",
]
