"""Interfaces of the director's external collaborators, plus in-process defaults.

Everything here is injected into the director at construction; there are no
process-wide singletons, so tests substitute fakes freely.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from director.core.enums import Severity
from director.utils.event_log import EventLog, SimEvent

if TYPE_CHECKING:
    from director.core.catalog import CharacterEntry, StructureEntry
    from director.inference.predictors import Predictor

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

class CatalogProvider(Protocol):
    def get_character_catalog(self) -> list[CharacterEntry]: ...

    def get_structure_catalog(self) -> list[StructureEntry]: ...

    def get_model(self, item_id: str) -> str | None: ...


class SceneGraphHost(Protocol):
    def add_to_scene(self, handle: str) -> None: ...

    def remove_from_scene(self, handle: str) -> None: ...


class ModelStore(Protocol):
    def load(self, name: str) -> Predictor: ...

    def save(self, name: str, model: Predictor) -> None: ...


class Trainer(Protocol):
    async def train(self) -> None: ...


class ErrorReporter(Protocol):
    def report(self, error: BaseException, context: str) -> None: ...


class Notifier(Protocol):
    def notify(self, message: str, severity: Severity) -> None: ...


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

class LoggingErrorReporter:
    """Reports errors to the log and keeps a count per context."""

    __slots__ = ("counts",)

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def report(self, error: BaseException, context: str) -> None:
        self.counts[context] = self.counts.get(context, 0) + 1
        logger.error("%s failed: %s", context, error, exc_info=error)


class EventLogNotifier:
    """Player notifications, kept in an EventLog for the UI to poll."""

    __slots__ = ("_log", "_clock")

    def __init__(self, log: EventLog | None = None, clock=None) -> None:
        self._log = log if log is not None else EventLog()
        self._clock = clock

    @property
    def log(self) -> EventLog:
        return self._log

    def notify(self, message: str, severity: Severity) -> None:
        stamp = self._clock() if self._clock is not None else 0.0
        self._log.append(SimEvent(timestamp=stamp, category=severity.value, message=message))
        level = logging.WARNING if severity in (Severity.WARNING, Severity.ERROR) else logging.INFO
        logger.log(level, "[notify:%s] %s", severity.value, message)


class RecordingScene:
    """Scene host that only tracks which handles are currently shown."""

    __slots__ = ("live", "added", "removed")

    def __init__(self) -> None:
        self.live: dict[str, int] = {}
        self.added: int = 0
        self.removed: int = 0

    def add_to_scene(self, handle: str) -> None:
        self.live[handle] = self.live.get(handle, 0) + 1
        self.added += 1

    def remove_from_scene(self, handle: str) -> None:
        count = self.live.get(handle, 0)
        if count <= 1:
            self.live.pop(handle, None)
        else:
            self.live[handle] = count - 1
        self.removed += 1

    def __len__(self) -> int:
        return sum(self.live.values())
