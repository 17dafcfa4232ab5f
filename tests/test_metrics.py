"""Tests for the metrics collector and its snapshots."""

import sys
import os
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from director.engine.game_loop import SimClock
from director.engine.metrics import MetricsCollector, MetricsSnapshot


class TestMetricsCollector(unittest.TestCase):

    def setUp(self):
        self.clock = SimClock(0.0)
        self.metrics = MetricsCollector(self.clock)

    def test_starts_empty(self):
        snap = self.metrics.snapshot()
        self.assertEqual(snap, MetricsSnapshot())
        self.assertEqual(snap.cache_hit_rate, 0.0)

    def test_running_average(self):
        self.metrics.record_inference(2.0)
        self.metrics.record_inference(4.0)
        self.metrics.record_inference(6.0)
        snap = self.metrics.snapshot()
        self.assertEqual(snap.inference_count, 3)
        self.assertAlmostEqual(snap.avg_inference_ms, 4.0)

    def test_hit_rate(self):
        self.metrics.record_hit()
        self.metrics.record_hit()
        self.metrics.record_hit()
        self.metrics.record_miss()
        self.assertAlmostEqual(self.metrics.snapshot().cache_hit_rate, 0.75)

    def test_last_updated_follows_clock(self):
        self.clock.advance(12.5)
        self.metrics.record_miss()
        self.assertEqual(self.metrics.snapshot().last_updated, 12.5)

    def test_snapshot_is_detached(self):
        before = self.metrics.snapshot()
        self.metrics.record_hit()
        self.metrics.record_eviction()
        self.assertEqual(before.cache_hits, 0)
        self.assertEqual(before.cache_evictions, 0)
        with self.assertRaises(AttributeError):
            before.cache_hits = 10  # frozen

    def test_reset(self):
        self.metrics.record_inference(1.0)
        self.metrics.record_hit()
        self.metrics.reset()
        self.assertEqual(self.metrics.snapshot(), MetricsSnapshot())

    def test_to_dict_keys(self):
        data = self.metrics.snapshot().to_dict()
        self.assertIn("cache_hit_rate", data)
        self.assertEqual(data["inference_count"], 0)


if __name__ == "__main__":
    unittest.main()
