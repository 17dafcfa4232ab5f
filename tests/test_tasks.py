"""Tests for the task system: generation, progress tracking, completion."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.director_rig import DirectorRig
from director.core.enums import TaskState
from director.core.tasks import TASK_TEMPLATES, Task, TaskDirector
from director.engine.game_loop import SimClock


def _tasks(clock=None) -> TaskDirector:
    return TaskDirector(target_per_level=2, reward_per_level=50, clock=clock or SimClock())


# ---------------------------------------------------------------------------
# Task model
# ---------------------------------------------------------------------------

class TestTaskModel:
    def test_defaults(self):
        t = Task(task_id=1, description="Defeat 4 enemies", target=4)
        assert t.progress == 0
        assert not t.completed
        assert t.progress_ratio == 0.0

    def test_progress_ratio_capped(self):
        t = Task(task_id=1, description="", target=2, progress=5)
        assert t.progress_ratio == 1.0

    def test_to_dict(self):
        t = Task(task_id=3, description="x", target=6, reward=150, completed_at=9.0)
        d = t.to_dict()
        assert d["completed"] is True
        assert d["reward"] == 150


# ---------------------------------------------------------------------------
# Task director
# ---------------------------------------------------------------------------

class TestTaskDirector:
    def test_no_task_initially(self):
        tasks = _tasks()
        assert tasks.state == TaskState.NO_TASK
        assert tasks.current_task is None
        assert tasks.record_progress(True) is False

    def test_level_four_task(self):
        tasks = _tasks()
        task = tasks.generate_task(4)
        assert task.target == 8
        assert task.reward == 200
        assert task.description == TASK_TEMPLATES[0].format(target=8)
        assert tasks.state == TaskState.ACTIVE

    def test_completes_exactly_at_target(self):
        clock = SimClock(0.0)
        tasks = _tasks(clock)
        tasks.generate_task(4)
        for _ in range(7):
            assert tasks.record_progress(True) is False
        clock.advance(3.0)
        assert tasks.record_progress(True) is True
        task = tasks.current_task
        assert task.progress == 8
        assert task.completed_at == 3.0
        assert tasks.state == TaskState.COMPLETED

    def test_progress_never_exceeds_target(self):
        tasks = _tasks()
        tasks.generate_task(1)
        results = [tasks.record_progress(True) for _ in range(5)]
        assert results == [False, True, False, False, False]
        assert tasks.current_task.progress == 2

    def test_no_advance_is_ignored(self):
        tasks = _tasks()
        tasks.generate_task(2)
        assert tasks.record_progress(False) is False
        assert tasks.current_task.progress == 0

    def test_new_task_replaces_current(self):
        tasks = _tasks()
        first = tasks.generate_task(3)
        tasks.record_progress(True)
        second = tasks.generate_task(5)
        assert second.task_id == first.task_id + 1
        current = tasks.current_task
        assert current.task_id == second.task_id
        assert current.progress == 0
        assert current.target == 10

    def test_current_task_is_a_copy(self):
        tasks = _tasks()
        tasks.generate_task(2)
        snapshot = tasks.current_task
        snapshot.progress = 99
        assert tasks.current_task.progress == 0

    def test_templates_rotate(self):
        tasks = _tasks()
        descriptions = {tasks.generate_task(1).description for _ in range(len(TASK_TEMPLATES))}
        assert len(descriptions) == len(TASK_TEMPLATES)

    def test_reset(self):
        tasks = _tasks()
        tasks.generate_task(1)
        tasks.reset()
        assert tasks.state == TaskState.NO_TASK


# ---------------------------------------------------------------------------
# Through the director
# ---------------------------------------------------------------------------

class TestDirectorTasks:
    def test_completion_notifies(self):
        rig = DirectorRig()
        tasks_before = rig.notifications("success")
        rig.director.generate_task(1)
        rig.director.record_progress(True)
        assert rig.director.record_progress(True) is True
        assert rig.director.get_task_state() == TaskState.COMPLETED
        success = rig.notifications("success")
        assert len(success) == len(tasks_before) + 1
        assert "+50" in success[-1]

    def test_tasks_work_without_models(self):
        rig = DirectorRig(with_models=False)
        assert rig.director.generate_task(2).target == 4

    def test_level_up_generates_task_and_wave(self):
        rig = DirectorRig(enemy_output=(0.2, 2.0))
        rig.start()
        rig.director.generate_task(1)
        rig.director.record_progress(True)

        wave = rig.director.on_level_up(2)

        task = rig.director.get_current_task()
        assert task.target == 4
        assert task.progress == 0
        assert len(wave) == 2
        assert all(e.level == 2 for e in wave)
        assert "Level 2!" in rig.notifications("success")
