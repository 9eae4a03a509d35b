from __future__ import annotations

"""Display helpers for the scoreboard, timer and end-of-session summary."""

from typing import Any, Dict

from ..app.quiz_engine import SessionSummary
from ..app.session_state import SessionSnapshot


def format_clock(seconds: int) -> str:
    """mm:ss for the countdown display."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def progress_fraction(time_remaining: int, total: int) -> float:
    """Elapsed share of the session, clamped to [0, 1]."""
    if total <= 0:
        return 1.0
    return min(1.0, max(0.0, 1 - time_remaining / total))


def format_scoreboard(snap: SessionSnapshot, high_score: int) -> str:
    return (
        f"Score {snap.score} | Streak {snap.streak} | Best {snap.best_streak} "
        f"| High {high_score} | {format_clock(snap.time_remaining_s)}"
    )


def summary_to_record(summary: SessionSummary) -> Dict[str, Any]:
    """Flatten a session summary into a history row."""
    return {
        "session_start": summary.started_at,
        "difficulty": summary.difficulty.value,
        "score": summary.final_score,
        "best_streak": summary.best_streak,
        "answered": summary.answered,
        "correct": summary.correct,
        "duration_s": max(0, int((summary.ended_at - summary.started_at).total_seconds())),
    }


def format_summary(summary: SessionSummary, high_score: int) -> str:
    """Return a human-readable end-of-session summary."""
    lines = [f"Final score: {summary.final_score}"]
    if summary.answered:
        pct = 100.0 * summary.correct / summary.answered
        lines.append(f"Answered: {summary.correct}/{summary.answered} correct ({pct:.0f}%)")
    else:
        lines.append("Answered: 0")
    lines.append(f"Best streak: {summary.best_streak}")
    if summary.new_high_score:
        lines.append(f"New high score: {high_score}!")
    else:
        lines.append(f"High score: {high_score}")
    return "\n".join(lines)
