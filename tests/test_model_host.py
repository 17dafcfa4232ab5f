"""Tests for model loading: success, train-then-retry, degradation, dispose races."""

import sys
import os
import asyncio

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.director_rig import DirectorRig
from director.collaborators import EventLogNotifier, LoggingErrorReporter
from director.core.enums import ModelKind, ModelState
from director.errors import ModelUnavailableError
from director.inference.model_host import ModelHost
from director.inference.predictors import ConstantPredictor
from director.inference.store import BaselineTrainer, InMemoryModelStore


ENEMY = "enemy-selection-model"
STRUCTURE = "structure-placement-model"


class _NoopTrainer:
    def __init__(self):
        self.runs = 0

    async def train(self):
        self.runs += 1


class _FailingTrainer:
    async def train(self):
        raise RuntimeError("no GPU")


class _DisposingTrainer:
    """Writes the models, but the host is disposed before the retry finishes."""

    def __init__(self, store):
        self.store = store
        self.host = None

    async def train(self):
        self.store.save(ENEMY, ConstantPredictor((0.1, 1.0)))
        self.store.save(STRUCTURE, ConstantPredictor((0.1, 0.5, 0.5)))
        self.host.dispose()


def _host(store, trainer=None):
    reporter = LoggingErrorReporter()
    notifier = EventLogNotifier()
    host = ModelHost(store, trainer, reporter, notifier, ENEMY, STRUCTURE)
    return host, reporter, notifier


def _full_store():
    return InMemoryModelStore({
        ENEMY: ConstantPredictor((0.7, 2.4)),
        STRUCTURE: ConstantPredictor((0.66, 0.5, 0.5)),
    })


class TestModelHostLoad:
    def test_loads_both_models(self):
        store = _full_store()
        trainer = _NoopTrainer()
        host, reporter, _ = _host(store, trainer)
        assert host.state == ModelState.UNLOADED
        assert asyncio.run(host.ensure_models_ready()) is True
        assert host.state == ModelState.READY
        assert trainer.runs == 0
        assert store.load_calls == 2
        assert host.infer(ModelKind.ENEMY, (0.1, 0.0, 0.0)) == (0.7, 2.4)
        assert reporter.counts == {}

    def test_repeat_calls_do_not_reload(self):
        store = _full_store()
        host, _, _ = _host(store)
        asyncio.run(host.ensure_models_ready())
        asyncio.run(host.ensure_models_ready())
        assert store.load_calls == 2

    def test_concurrent_callers_share_one_load(self):
        store = _full_store()
        host, _, _ = _host(store)

        async def _both():
            return await asyncio.gather(host.ensure_models_ready(), host.ensure_models_ready())

        assert asyncio.run(_both()) == [True, True]
        assert store.load_calls == 2

    def test_missing_models_trigger_training_then_retry(self):
        store = InMemoryModelStore()
        trainer = BaselineTrainer(store, ENEMY, STRUCTURE)
        host, reporter, notifier = _host(store, trainer)
        assert asyncio.run(host.ensure_models_ready()) is True
        assert trainer.runs == 1
        assert store.load_calls == 4
        categories = [e.category for e in notifier.log.latest()]
        assert categories == ["info", "success"]
        assert reporter.counts == {}

    def test_partial_store_retries_both(self):
        store = InMemoryModelStore({ENEMY: ConstantPredictor((0.1, 1.0))})
        trainer = BaselineTrainer(store, ENEMY, STRUCTURE)
        host, _, _ = _host(store, trainer)
        assert asyncio.run(host.ensure_models_ready()) is True
        assert store.load_calls == 4


class TestModelHostDegradation:
    def test_unavailable_after_single_retry(self):
        store = InMemoryModelStore()
        trainer = _NoopTrainer()
        host, reporter, notifier = _host(store, trainer)
        assert asyncio.run(host.ensure_models_ready()) is False
        assert host.state == ModelState.UNAVAILABLE
        assert trainer.runs == 1
        assert store.load_calls == 4
        assert reporter.counts == {"ensure_models_ready": 1}
        assert notifier.log.latest()[-1].category == "warning"

    def test_unavailable_is_terminal(self):
        store = InMemoryModelStore()
        trainer = _NoopTrainer()
        host, reporter, _ = _host(store, trainer)
        asyncio.run(host.ensure_models_ready())
        asyncio.run(host.ensure_models_ready())
        assert trainer.runs == 1
        assert reporter.counts == {"ensure_models_ready": 1}

    def test_trainer_failure_is_reported(self):
        host, reporter, _ = _host(InMemoryModelStore(), _FailingTrainer())
        assert asyncio.run(host.ensure_models_ready()) is False
        assert reporter.counts == {"train": 1, "ensure_models_ready": 1}

    def test_no_trainer_still_retries(self):
        store = InMemoryModelStore()
        host, _, _ = _host(store, None)
        asyncio.run(host.ensure_models_ready())
        assert store.load_calls == 4
        assert host.state == ModelState.UNAVAILABLE

    def test_infer_raises_when_not_ready(self):
        host, _, _ = _host(_full_store())
        with pytest.raises(ModelUnavailableError):
            host.infer(ModelKind.ENEMY, (0.1, 0.0, 0.0))

    def test_director_degrades_quietly(self):
        rig = DirectorRig(with_models=False, trainer=_NoopTrainer())
        assert rig.start() is False
        assert rig.director.spawn_enemies(3, 0, 0.0) == []
        assert rig.director.place_structure(3, 0) is None
        assert rig.director.get_metrics().cache_misses == 0
        assert rig.notifications("warning")


class TestModelHostDispose:
    def test_load_finishing_after_dispose_is_discarded(self):
        store = InMemoryModelStore()
        trainer = _DisposingTrainer(store)
        host, reporter, _ = _host(store, trainer)
        trainer.host = host
        assert asyncio.run(host.ensure_models_ready()) is False
        assert host.state == ModelState.DISPOSED
        assert reporter.counts == {}
        with pytest.raises(ModelUnavailableError):
            host.infer(ModelKind.ENEMY, (0.1, 0.0, 0.0))

    def test_dispose_after_ready(self):
        host, _, _ = _host(_full_store())
        asyncio.run(host.ensure_models_ready())
        host.dispose()
        host.dispose()
        assert host.state == ModelState.DISPOSED
        assert asyncio.run(host.ensure_models_ready()) is False
