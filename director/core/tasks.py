"""Task system: one dynamic task per level-up, progress tracking, completion.

State machine:
  NO_TASK -> ACTIVE -> COMPLETED -> (replaced by the next generate_task)

A new task always replaces the current one, even an unfinished one; its
partial progress is discarded.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from director.core.enums import TaskState

if TYPE_CHECKING:
    from director.config import DirectorConfig


# ---------------------------------------------------------------------------
# Task data model
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Task:
    """The player's current objective."""

    task_id: int
    description: str
    target: int
    progress: int = 0
    reward: int = 0
    created_at: float = 0.0
    completed_at: float | None = None

    @property
    def completed(self) -> bool:
        return self.completed_at is not None

    @property
    def progress_ratio(self) -> float:
        if self.target <= 0:
            return 1.0
        return min(self.progress / self.target, 1.0)

    def copy(self) -> Task:
        return Task(
            task_id=self.task_id,
            description=self.description,
            target=self.target,
            progress=self.progress,
            reward=self.reward,
            created_at=self.created_at,
            completed_at=self.completed_at,
        )

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "description": self.description,
            "target": self.target,
            "progress": self.progress,
            "reward": self.reward,
            "created_at": self.created_at,
            "completed_at": self.completed_at,
            "completed": self.completed,
        }


# Description templates, rotated by task id
TASK_TEMPLATES: tuple[str, ...] = (
    "Defeat {target} enemies",
    "Clear {target} hostiles from the district",
    "Hold the line against {target} attackers",
)


# ---------------------------------------------------------------------------
# Task director
# ---------------------------------------------------------------------------

class TaskDirector:
    """Owns the single current task."""

    __slots__ = ("_target_per_level", "_reward_per_level", "_clock", "_current", "_next_id")

    def __init__(
        self,
        target_per_level: int = 2,
        reward_per_level: int = 50,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._target_per_level = target_per_level
        self._reward_per_level = reward_per_level
        self._clock = clock
        self._current: Task | None = None
        self._next_id = 1

    @classmethod
    def from_config(cls, config: DirectorConfig, clock: Callable[[], float] = time.monotonic) -> TaskDirector:
        return cls(config.task_target_per_level, config.task_reward_per_level, clock)

    @property
    def state(self) -> TaskState:
        if self._current is None:
            return TaskState.NO_TASK
        if self._current.completed:
            return TaskState.COMPLETED
        return TaskState.ACTIVE

    @property
    def current_task(self) -> Task | None:
        return self._current.copy() if self._current is not None else None

    def generate_task(self, level: int) -> Task:
        """Create a new active task for *level*, replacing whatever was current."""
        level = max(level, 1)
        task_id = self._next_id
        self._next_id += 1
        target = level * self._target_per_level
        template = TASK_TEMPLATES[(task_id - 1) % len(TASK_TEMPLATES)]
        self._current = Task(
            task_id=task_id,
            description=template.format(target=target),
            target=target,
            reward=level * self._reward_per_level,
            created_at=self._clock(),
        )
        return self._current.copy()

    def record_progress(self, did_advance: bool) -> bool:
        """Advance the active task by one. Returns True if it just completed."""
        task = self._current
        if task is None or task.completed or not did_advance:
            return False
        task.progress = min(task.progress + 1, task.target)
        if task.progress >= task.target:
            task.completed_at = self._clock()
            return True
        return False

    def reset(self) -> None:
        self._current = None
