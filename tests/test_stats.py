import unittest
from datetime import datetime, timedelta, timezone

from geoquiz.quiz.models import Difficulty
from geoquiz.app.quiz_engine import SessionSummary
from geoquiz.app.session_state import Phase, SessionSnapshot
from geoquiz.stats.stats import format_clock, format_scoreboard, format_summary, progress_fraction, summary_to_record

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def summary(**kw) -> SessionSummary:
    data = dict(
        difficulty=Difficulty.MEDIUM,
        final_score=95,
        best_streak=3,
        answered=5,
        correct=4,
        started_at=T0,
        ended_at=T0 + timedelta(seconds=120),
        new_high_score=False,
    )
    data.update(kw)
    return SessionSummary(**data)


class StatsTests(unittest.TestCase):
    def test_format_clock(self) -> None:
        self.assertEqual(format_clock(120), "02:00")
        self.assertEqual(format_clock(65), "01:05")
        self.assertEqual(format_clock(-4), "00:00")

    def test_progress_fraction(self) -> None:
        self.assertEqual(progress_fraction(120, 120), 0.0)
        self.assertEqual(progress_fraction(30, 120), 0.75)
        self.assertEqual(progress_fraction(0, 0), 1.0)

    def test_scoreboard(self) -> None:
        snap = SessionSnapshot(
            phase=Phase.RUNNING,
            difficulty=Difficulty.EASY,
            score=35,
            streak=2,
            best_streak=2,
            time_remaining_s=98,
            current_question=None,
            answered=2,
            correct=2,
        )
        self.assertEqual(format_scoreboard(snap, 100), "Score 35 | Streak 2 | Best 2 | High 100 | 01:38")

    def test_summary_to_record(self) -> None:
        rec = summary_to_record(summary())
        self.assertEqual(rec["difficulty"], "medium")
        self.assertEqual(rec["duration_s"], 120)
        self.assertEqual(rec["score"], 95)

    def test_format_summary(self) -> None:
        text = format_summary(summary(new_high_score=True), 95)
        self.assertIn("Final score: 95", text)
        self.assertIn("4/5 correct (80%)", text)
        self.assertIn("New high score: 95!", text)
        self.assertIn("Answered: 0", format_summary(summary(answered=0, correct=0), 200))


if __name__ == "__main__":
    unittest.main()
