"""Tests for the headless game loop driving the director.

The loop runs on a SimClock with constant predictors, so two loops with the
same seed must reach identical populations.
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.director_rig import DirectorRig
from director.core.enums import TaskState
from director.engine.game_loop import GameLoop, SimClock


def _loop(frames: int = 300, **overrides) -> tuple[GameLoop, DirectorRig]:
    rig = DirectorRig(
        enemy_output=(0.7, 2.4),
        structure_output=(0.3, 0.2, 0.8),
        max_frames=frames,
        enemy_spawn_chance=0.2,
        structure_spawn_chance=0.05,
        **overrides,
    )
    rig.start()
    return GameLoop(rig.config, rig.director, rig.clock), rig


def _fingerprint(loop: GameLoop) -> tuple:
    snap = loop.snapshot()
    return (
        snap.frame, snap.score, snap.level, snap.kills,
        tuple(sorted((e["id"], round(e["x"], 6), round(e["z"], 6), e["health"]) for e in snap.enemies)),
        tuple(sorted((s["id"], s["building_id"]) for s in snap.structures)),
    )


class TestSimClock:
    def test_advance(self):
        clock = SimClock(1.0)
        assert clock() == 1.0
        assert clock.advance(0.5) == 1.5
        assert clock.now == 1.5


class TestGameLoop:
    def test_runs_to_frame_budget(self):
        loop, rig = _loop(frames=120)
        loop.run()
        assert loop.frame == 120
        assert loop.tick_once() is False
        assert rig.clock.now > 1.9

    def test_population_and_task_appear(self):
        loop, rig = _loop(frames=300)
        loop.run()
        assert rig.director.get_enemies() or loop.kills > 0
        assert len(rig.director.get_enemies()) <= rig.config.max_enemies
        assert rig.director.get_task_state() in (TaskState.ACTIVE, TaskState.COMPLETED)
        assert rig.reporter.counts == {}

    def test_enemies_stay_in_bounds(self):
        loop, rig = _loop(frames=300)
        for _ in range(300):
            loop.tick_once()
            for enemy in rig.director.get_enemies():
                assert rig.director.lifecycle.bounds.contains(enemy.pos)

    def test_player_kills_advance_score(self):
        loop, rig = _loop(frames=1200, player_attack_range=400.0, player_damage_per_frame=200)
        loop.run()
        assert loop.kills > 0
        assert loop.score >= loop.kills * rig.config.score_per_kill
        assert loop.level == loop.score // rig.config.score_per_level + 1

    def test_same_seed_same_run(self):
        a, _ = _loop(frames=400)
        b, _ = _loop(frames=400)
        a.run()
        b.run()
        assert _fingerprint(a) == _fingerprint(b)

    def test_runs_without_models(self):
        rig = DirectorRig(with_models=False, max_frames=60, enemy_spawn_chance=1.0)
        rig.start()
        loop = GameLoop(rig.config, rig.director, rig.clock)
        loop.run()
        assert loop.frame == 60
        assert rig.director.get_enemies() == []
        assert loop.snapshot().model_state == "UNAVAILABLE"

    def test_snapshot_is_detached(self):
        loop, rig = _loop(frames=100)
        loop.run()
        snap = loop.snapshot()
        count = len(rig.director.get_enemies())
        rig.director.dispose()
        assert snap.frame == 100
        assert len(snap.enemies) == count
        assert rig.director.get_enemies() == []
