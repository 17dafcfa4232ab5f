"""Tests for dense predictors, feature normalization and the model stores."""

import sys
import os
import asyncio
import json

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from director.core.behaviors import EnemyBehavior, classify
from director.core.catalog import BUILDING_IDS, StaticCatalog
from director.core.enums import Region
from director.inference.predictors import (
    ConstantPredictor, DenseLayer, DensePredictor, enemy_features, structure_features,
)
from director.inference.store import (
    BaselineTrainer, InMemoryModelStore, NpzModelStore,
    baseline_enemy_predictor, baseline_structure_predictor,
)


# ---------------------------------------------------------------------------
# Dense layers
# ---------------------------------------------------------------------------

class TestDensePredictor:
    def test_linear_forward(self):
        layer = DenseLayer(np.array([[1.0, 0.0], [0.0, 2.0]]), np.array([0.5, -1.0]))
        assert DensePredictor([layer]).predict((1.0, 3.0)) == (1.5, 5.0)

    def test_two_layers_with_relu(self):
        hidden = DenseLayer(np.array([[1.0, -1.0]]), np.zeros(2), "relu")
        out = DenseLayer(np.array([[1.0], [1.0]]), np.zeros(1), "linear")
        model = DensePredictor([hidden, out])
        assert model.input_size == 1
        assert model.output_size == 1
        assert model.predict((2.0,)) == (2.0,)
        assert model.predict((-3.0,)) == (3.0,)

    def test_softmax_sums_to_one(self):
        layer = DenseLayer(np.eye(3), np.zeros(3), "softmax")
        out = DensePredictor([layer]).predict((1.0, 2.0, 3.0))
        assert sum(out) == pytest.approx(1.0)
        assert out[2] > out[1] > out[0]

    def test_bad_shapes_rejected(self):
        with pytest.raises(ValueError):
            DenseLayer(np.zeros((2, 3)), np.zeros(2))
        with pytest.raises(ValueError):
            DenseLayer(np.zeros((2, 2)), np.zeros(2), "tanh")
        with pytest.raises(ValueError):
            DensePredictor([
                DenseLayer(np.zeros((2, 3)), np.zeros(3)),
                DenseLayer(np.zeros((2, 1)), np.zeros(1)),
            ])
        with pytest.raises(ValueError):
            DensePredictor([])

    def test_wrong_feature_count(self):
        with pytest.raises(ValueError):
            baseline_enemy_predictor().predict((0.1, 0.2))

    def test_constant_predictor_counts_calls(self):
        model = ConstantPredictor([0.1, 2])
        assert model.predict((0.0,)) == (0.1, 2.0)
        model.predict((5.0,))
        assert model.calls == 2


class TestFeatures:
    def test_enemy_normalization(self):
        assert enemy_features(3, 20, 0.25) == (0.3, 0.2, 0.25)

    def test_structure_region_encoding(self):
        assert structure_features(2, 50, Region.SUBURB) == (0.2, 0.5, 0.0)
        assert structure_features(2, 50, Region.CITY_CENTER) == (0.2, 0.5, 1.0)


# ---------------------------------------------------------------------------
# Baselines
# ---------------------------------------------------------------------------

class TestBaselines:
    def test_enemy_baseline_leans_fast_with_level(self):
        model = baseline_enemy_predictor()
        low = model.predict(enemy_features(1, 0, 0.0))
        high = model.predict(enemy_features(10, 0, 0.0))
        assert classify(low[0]) == EnemyBehavior.BASIC
        assert classify(high[0]) == EnemyBehavior.FAST
        assert high[1] > low[1]

    def test_enemy_baseline_spawns_fewer_in_crowds(self):
        model = baseline_enemy_predictor()
        assert model.predict(enemy_features(3, 90, 0.0))[1] < model.predict(enemy_features(3, 0, 0.0))[1]

    def test_structure_baseline_outputs_normalized(self):
        model = baseline_structure_predictor()
        for level in (1, 5, 10):
            for count in (0, 50, 200):
                for region in Region:
                    out = model.predict(structure_features(level, count, region))
                    assert len(out) == 3
                    assert all(0.0 <= v <= 1.0 for v in out)


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

class TestStores:
    def test_in_memory_missing_raises(self):
        store = InMemoryModelStore()
        with pytest.raises(KeyError):
            store.load("nope")
        assert store.load_calls == 1

    def test_npz_round_trip(self, tmp_path):
        store = NpzModelStore(tmp_path / "models")
        original = baseline_structure_predictor()
        store.save("structure-placement-model", original)
        loaded = store.load("structure-placement-model")
        feats = structure_features(4, 30, Region.CITY_CENTER)
        assert np.allclose(loaded.predict(feats), original.predict(feats))
        assert (tmp_path / "models" / "structure-placement-model.npz").exists()

    def test_npz_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            NpzModelStore(tmp_path).load("enemy-selection-model")

    def test_npz_rejects_non_dense(self, tmp_path):
        with pytest.raises(TypeError):
            NpzModelStore(tmp_path).save("x", ConstantPredictor((1.0,)))

    def test_baseline_trainer_writes_both(self, tmp_path):
        store = NpzModelStore(tmp_path)
        trainer = BaselineTrainer(store, "enemy-selection-model", "structure-placement-model")
        asyncio.run(trainer.train())
        assert trainer.runs == 1
        assert store.load("enemy-selection-model").output_size == 2
        assert store.load("structure-placement-model").output_size == 3


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TestStaticCatalog:
    def test_default_catalog_matches_building_ids(self):
        catalog = StaticCatalog()
        assert tuple(s.id for s in catalog.get_structure_catalog()) == BUILDING_IDS
        assert catalog.get_model("building-type-a") == "model:building-type-a"
        assert catalog.get_model("unknown") is None

    def test_catalog_lists_are_copies(self):
        catalog = StaticCatalog()
        catalog.get_character_catalog().clear()
        assert catalog.get_character_catalog()

    def test_from_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "characters": [{"id": "character-male-e", "name": "Quill"}],
            "structures": [{"id": "building-type-x", "footprint": {"width": 3, "depth": 7}}],
        }))
        catalog = StaticCatalog.from_json(path)
        assert [c.id for c in catalog.get_character_catalog()] == ["character-male-e"]
        structure = catalog.get_structure_catalog()[0]
        assert structure.footprint.span == 7
        assert catalog.get_model("building-type-x") == "model:building-type-x"
