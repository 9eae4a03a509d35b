from __future__ import annotations

"""Session state machine: score, streak, timer and the in-flight question.

States are Idle (initial and terminal) and Running. All mutation goes through
start / set_question / tick / submit_answer / reset; callers read state via
properties or `snapshot()`.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional

from ..errors import InvalidTransition
from ..quiz.models import Difficulty, Question

log = logging.getLogger(__name__)

TOTAL_TIME_S = 120
BASE_POINTS: Mapping[Difficulty, int] = {
    Difficulty.EASY: 15,
    Difficulty.MEDIUM: 20,
    Difficulty.HARD: 30,
}
STREAK_BONUS_CAP = 5
STREAK_BONUS_STEP = 5


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class SessionState:
    active: bool = False
    difficulty: Difficulty = Difficulty.EASY
    score: int = 0
    streak: int = 0
    best_streak: int = 0
    time_remaining_s: int = TOTAL_TIME_S
    current_question: Optional[Question] = None
    answered: int = 0
    correct: int = 0


@dataclass(frozen=True)
class SessionSnapshot:
    phase: Phase
    difficulty: Difficulty
    score: int
    streak: int
    best_streak: int
    time_remaining_s: int
    current_question: Optional[Question]
    answered: int
    correct: int


@dataclass(frozen=True)
class AnswerOutcome:
    correct: bool
    points: int
    feedback: str
    explanation: str
    question: Question


def base_points(difficulty: Difficulty | str) -> int:
    return BASE_POINTS[Difficulty.parse(difficulty)]


def streak_bonus(streak: int) -> int:
    return min(streak, STREAK_BONUS_CAP) * STREAK_BONUS_STEP


class SessionStateMachine:
    def __init__(self, total_time_s: int = TOTAL_TIME_S) -> None:
        if total_time_s < 1:
            raise ValueError(f"total_time_s must be >= 1, got {total_time_s}")
        self.total_time_s = int(total_time_s)
        self._state = SessionState(time_remaining_s=self.total_time_s)

    # --- read-only view ---

    @property
    def phase(self) -> Phase:
        return Phase.RUNNING if self._state.active else Phase.IDLE

    @property
    def active(self) -> bool:
        return self._state.active

    @property
    def difficulty(self) -> Difficulty:
        return self._state.difficulty

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def streak(self) -> int:
        return self._state.streak

    @property
    def best_streak(self) -> int:
        return self._state.best_streak

    @property
    def time_remaining(self) -> int:
        return self._state.time_remaining_s

    @property
    def current_question(self) -> Optional[Question]:
        return self._state.current_question

    @property
    def answered(self) -> int:
        return self._state.answered

    @property
    def correct(self) -> int:
        return self._state.correct

    def snapshot(self) -> SessionSnapshot:
        s = self._state
        return SessionSnapshot(
            phase=self.phase,
            difficulty=s.difficulty,
            score=s.score,
            streak=s.streak,
            best_streak=s.best_streak,
            time_remaining_s=s.time_remaining_s,
            current_question=s.current_question,
            answered=s.answered,
            correct=s.correct,
        )

    # --- transitions ---

    def start(self, difficulty: Difficulty | str) -> None:
        """Begin a fresh session. Allowed from either state."""
        self._state = SessionState(
            active=True,
            difficulty=Difficulty.parse(difficulty),
            time_remaining_s=self.total_time_s,
        )
        log.debug("Session started (%s, %ss)", self._state.difficulty.value, self.total_time_s)

    def set_question(self, question: Question) -> None:
        if not self._state.active:
            raise InvalidTransition("cannot set a question while idle")
        if self._state.current_question is not None:
            raise InvalidTransition("a question is already in flight")
        self._state.current_question = question

    def tick(self) -> bool:
        """Advance the timer by one second.

        Returns:
            True on the tick that ends the session, False otherwise.
        """
        if not self._state.active:
            raise InvalidTransition("tick while idle")
        self._state.time_remaining_s = max(0, self._state.time_remaining_s - 1)
        if self._state.time_remaining_s > 0:
            return False
        self._state.active = False
        self._state.current_question = None
        log.debug("Session timer expired with score %d", self._state.score)
        return True

    def submit_answer(self, selected_value: str) -> AnswerOutcome:
        s = self._state
        if not s.active:
            raise InvalidTransition("answer submitted while idle")
        question = s.current_question
        if question is None:
            raise InvalidTransition("answer submitted with no question in flight")

        correct = question.is_correct(selected_value)
        points = 0
        if correct:
            points = base_points(s.difficulty) + streak_bonus(s.streak)
            s.score += points
            s.streak += 1
            s.best_streak = max(s.best_streak, s.streak)
            s.correct += 1
        else:
            s.streak = 0
        s.answered += 1
        s.current_question = None
        return AnswerOutcome(
            correct=correct,
            points=points,
            feedback=question.feedback_success if correct else question.feedback_error,
            explanation=question.explanation,
            question=question,
        )

    def reset(self) -> None:
        self._state = replace(SessionState(), difficulty=self._state.difficulty, time_remaining_s=self.total_time_s)
