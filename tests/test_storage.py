import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import ValidationError

from geoquiz.errors import StorageUnavailable
from geoquiz.storage import (
    HIGH_SCORE_KEY,
    JsonHighScoreStore,
    append_session_records,
    best_score,
    export_ndjson,
    load_all,
    make_record,
    query_trend,
    record_session,
    validate_records,
)

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def row(difficulty: str = "easy", score: int = 50, offset_min: int = 0, **kw):
    data = {
        "session_start": T0 + timedelta(minutes=offset_min),
        "difficulty": difficulty,
        "score": score,
        "best_streak": 2,
        "answered": 6,
        "correct": 3,
        "duration_s": 120,
    }
    data.update(kw)
    return data


class SessionHistoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name) / "data"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_empty_history(self) -> None:
        df = load_all(self.data_dir)
        self.assertTrue(df.empty)
        self.assertIn("accuracy", df.columns)
        self.assertEqual(best_score(df), 0)

    def test_record_and_load(self) -> None:
        rec = record_session(row(score=80), self.data_dir)
        record_session(row("hard", score=210, offset_min=5), self.data_dir)
        df = load_all(self.data_dir)
        self.assertEqual(len(df), 2)
        self.assertIn(rec.session_id, set(df["session_id"]))
        self.assertAlmostEqual(float(df["accuracy"].iloc[0]), 0.5, places=5)
        self.assertEqual(str(df["session_start"].dt.tz), "UTC")
        self.assertEqual(best_score(df), 210)
        self.assertEqual(best_score(df, "easy"), 80)

    def test_query_trend_sorted_by_start(self) -> None:
        record_session(row(score=30, offset_min=10), self.data_dir)
        record_session(row(score=10, offset_min=0), self.data_dir)
        record_session(row("medium", score=99), self.data_dir)
        trend = query_trend(load_all(self.data_dir), difficulty="easy")
        self.assertEqual(list(trend["score"]), [10, 30])
        with self.assertRaises(ValueError):
            query_trend(trend, difficulty="extreme")

    def test_duplicate_session_id_keeps_last(self) -> None:
        first = make_record(row(score=10), session_id="s-1")
        second = make_record(row(score=40), session_id="s-1")
        self.data_dir.mkdir(parents=True)
        append_session_records(validate_records([first]), self.data_dir)
        append_session_records(validate_records([second]), self.data_dir)
        df = load_all(self.data_dir)
        self.assertEqual(len(df), 1)
        self.assertEqual(int(df["score"].iloc[0]), 40)

    def test_naive_timestamp_becomes_utc(self) -> None:
        rec = make_record(row(session_start=datetime(2024, 3, 1, 9, 0)))
        self.assertEqual(rec.session_start.tzinfo, timezone.utc)

    def test_inconsistent_counts_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_record(row(correct=7, answered=6))
        with self.assertRaises(ValidationError):
            make_record(row(best_streak=4, correct=3))
        with self.assertRaises(ValidationError):
            make_record(row(difficulty="extreme"))

    def test_export_ndjson(self) -> None:
        record_session(row(), self.data_dir)
        out = Path(self._tmp.name) / "export" / "sessions.ndjson"
        export_ndjson(load_all(self.data_dir), out)
        lines = out.read_text(encoding="utf-8").strip().splitlines()
        self.assertEqual(len(lines), 1)
        self.assertEqual(json.loads(lines[0])["difficulty"], "easy")


class JsonHighScoreStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "high_score.json"
        self.store = JsonHighScoreStore(self.path)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_reads_zero(self) -> None:
        self.assertEqual(self.store.load_high_score(), 0)

    def test_save_then_load(self) -> None:
        self.store.save_high_score(215)
        self.assertEqual(self.store.load_high_score(), 215)
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), {HIGH_SCORE_KEY: 215})

    def test_other_keys_preserved(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
        self.store.save_high_score(90)
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(data, {"theme": "dark", HIGH_SCORE_KEY: 90})

    def test_corrupt_file_raises_then_recovers_on_save(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(StorageUnavailable):
            self.store.load_high_score()
        self.store.save_high_score(12)
        self.assertEqual(self.store.load_high_score(), 12)

    def test_non_numeric_value_reads_zero(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({HIGH_SCORE_KEY: "lots"}), encoding="utf-8")
        with self.assertLogs("geoquiz.storage.highscore", level="WARNING"):
            self.assertEqual(self.store.load_high_score(), 0)


if __name__ == "__main__":
    unittest.main()
