import math
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pandas as pd

from geoquiz.analytics import AnalyticsConfig, compute_metrics, ewma_by_session, load_and_prepare
from geoquiz.storage.store import record_session


class MetricsTests(unittest.TestCase):
    def test_compute_metrics(self) -> None:
        df = pd.DataFrame(
            {
                "score": [200, 0],
                "answered": [10, 0],
                "correct": [8, 0],
                "duration_s": [120, 0],
            }
        )
        out = compute_metrics(df, AnalyticsConfig())
        self.assertAlmostEqual(float(out["accuracy"][0]), 0.8, places=5)
        self.assertAlmostEqual(float(out["points_per_answer"][0]), 20.0, places=5)
        self.assertAlmostEqual(float(out["answers_per_min"][0]), 5.0, places=5)
        pace = 1 - math.exp(-0.5)
        self.assertAlmostEqual(float(out["pace_factor"][0]), pace, places=5)
        self.assertAlmostEqual(float(out["mark"][0]), 0.8 * pace, places=5)
        self.assertEqual(float(out["accuracy"][1]), 0.0)
        self.assertEqual(float(out["answers_per_min"][1]), 0.0)
        self.assertEqual(float(out["mark"][1]), 0.0)

    def test_config_bounds(self) -> None:
        with self.assertRaises(ValueError):
            AnalyticsConfig(alpha=0)
        with self.assertRaises(ValueError):
            AnalyticsConfig(smoothing_span=1)


class SmoothingTests(unittest.TestCase):
    def test_plain_ewma(self) -> None:
        df = pd.DataFrame({"session_idx": [1, 0], "score": [10.0, 0.0]})
        out = ewma_by_session(df, value_col="score", span=2)
        self.assertEqual(list(out["session_idx"]), [0, 1])
        self.assertAlmostEqual(float(out["score_smooth"].iloc[1]), 7.5, places=5)

    def test_grouped_ewma_keeps_groups_apart(self) -> None:
        df = pd.DataFrame(
            {
                "session_idx": [0, 1, 2, 3],
                "difficulty": ["easy", "hard", "easy", "hard"],
                "score": [0.0, 100.0, 10.0, 100.0],
            }
        )
        out = ewma_by_session(df, value_col="score", span=2, group_cols=["difficulty"])
        smooth = dict(zip(out["session_idx"], out["score_smooth"]))
        self.assertAlmostEqual(float(smooth[2]), 7.5, places=5)
        self.assertAlmostEqual(float(smooth[3]), 100.0, places=5)


class PrepareTests(unittest.TestCase):
    def test_load_and_prepare(self) -> None:
        t0 = datetime(2024, 5, 1, tzinfo=timezone.utc)
        with tempfile.TemporaryDirectory() as tmp:
            data_dir = Path(tmp)
            for i, level in enumerate(["hard", "easy", "easy"]):
                record_session(
                    {
                        "session_start": t0 + timedelta(hours=2 - i),
                        "difficulty": level,
                        "score": 40 * (i + 1),
                        "best_streak": 1,
                        "answered": 4,
                        "correct": 2,
                        "duration_s": 120,
                    },
                    data_dir,
                )
            df = load_and_prepare(data_dir, AnalyticsConfig())
        self.assertEqual(list(df["session_idx"]), [0, 1, 2])
        self.assertEqual(list(df["score"]), [120, 80, 40])
        self.assertIn("mark", df.columns)
        self.assertEqual(str(df["difficulty"].dtype), "category")

    def test_empty_history(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            df = load_and_prepare(Path(tmp), AnalyticsConfig())
        self.assertTrue(df.empty)


if __name__ == "__main__":
    unittest.main()
