"""Enumerations used throughout the director."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    PLACEMENT = 0
    CHARACTER = 1
    SCHEDULE = 2


@unique
class ModelKind(str, Enum):
    """The two predictors the director consumes."""

    ENEMY = "enemy"
    STRUCTURE = "structure"


@unique
class Region(IntEnum):
    """Structure placement regions, valued as the predictor sees them."""

    SUBURB = 0
    CITY_CENTER = 1


@unique
class Severity(str, Enum):
    """Notification severities understood by the UI."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@unique
class ModelState(IntEnum):
    """Lifecycle of the predictors held by the model host."""

    UNLOADED = 0
    LOADING = 1
    READY = 2
    UNAVAILABLE = 3
    DISPOSED = 4


@unique
class TaskState(IntEnum):
    """Task director states."""

    NO_TASK = 0
    ACTIVE = 1
    COMPLETED = 2
