from __future__ import annotations

"""Quiz engine: composition root for one local play session.

Wires the question catalog, the session state machine, the scheduler that
drives the post-answer pause, the high score store, the renderer and the
event bus. External drivers call `on_tick()` once per second and the
scheduler calls `on_advance_timeout()` after the pause; UI code calls
`start`, `submit_answer` and `reset`.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import Iterator, Optional

from ..errors import InvalidTransition, StorageUnavailable
from ..quiz.catalog import QuestionCatalog
from ..quiz.models import Difficulty, Question
from .collaborators import Cancellable, HighScoreStore, NullRenderer, Renderer, Scheduler, load_high_score_or_zero
from .events import ANSWER_RESOLVED, QUESTION_READY, SESSION_ENDED, EventBus
from .explain import trace as xtrace
from .session_state import AnswerOutcome, SessionSnapshot, SessionStateMachine

log = logging.getLogger(__name__)

ADVANCE_DELAY_MS = 1400


@dataclass(frozen=True)
class SessionSummary:
    difficulty: Difficulty
    final_score: int
    best_streak: int
    answered: int
    correct: int
    started_at: datetime
    ended_at: datetime
    new_high_score: bool


class QuizEngine:
    def __init__(
        self,
        catalog: QuestionCatalog,
        *,
        scheduler: Scheduler,
        high_scores: Optional[HighScoreStore] = None,
        renderer: Optional[Renderer] = None,
        machine: Optional[SessionStateMachine] = None,
        bus: Optional[EventBus] = None,
        advance_delay_ms: int = ADVANCE_DELAY_MS,
    ) -> None:
        self.catalog = catalog
        self.scheduler = scheduler
        self.high_scores = high_scores
        self.renderer = renderer or NullRenderer()
        self.machine = machine or SessionStateMachine()
        self.bus = bus or EventBus()
        self.advance_delay_ms = int(advance_delay_ms)

        self._generation = 0
        self._pending_advance: Optional[Cancellable] = None
        self._in_transition = False
        self._started_at: Optional[datetime] = None
        self._high_score = load_high_score_or_zero(high_scores)

    # --- read-only view for UIs ---

    @property
    def active(self) -> bool:
        return self.machine.active

    @property
    def difficulty(self) -> Difficulty:
        return self.machine.difficulty

    @property
    def score(self) -> int:
        return self.machine.score

    @property
    def streak(self) -> int:
        return self.machine.streak

    @property
    def best_streak(self) -> int:
        return self.machine.best_streak

    @property
    def time_remaining(self) -> int:
        return self.machine.time_remaining

    @property
    def current_question(self) -> Optional[Question]:
        return self.machine.current_question

    @property
    def high_score(self) -> int:
        return self._high_score

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def advance_pending(self) -> bool:
        return self._pending_advance is not None

    def snapshot(self) -> SessionSnapshot:
        return self.machine.snapshot()

    # --- commands ---

    def start(self, difficulty: Difficulty | str) -> Question:
        level = Difficulty.parse(difficulty)
        with self._transition():
            self._invalidate_pending()
            self.machine.start(level)
            self._started_at = datetime.now(timezone.utc)
            question = self._install_next_question()
        log.info("Session started at %s difficulty", level.value)
        xtrace("session_started", {"difficulty": level.value, "time": self.machine.time_remaining})
        self._publish_question(question)
        return question

    def reset(self) -> None:
        with self._transition():
            self._invalidate_pending()
            self.machine.reset()
            self._started_at = None
        log.info("Session reset")
        xtrace("session_reset", {})

    def submit_answer(self, value: str) -> Optional[AnswerOutcome]:
        """Resolve the in-flight question.

        Returns None, after logging, when no answer can be accepted (idle
        session or a question not yet issued).
        """
        with self._transition():
            try:
                outcome = self.machine.submit_answer(value)
            except InvalidTransition as exc:
                log.info("Ignoring answer %r: %s", value, exc)
                return None
            if self.machine.active:
                self._pending_advance = self.scheduler.call_later(
                    self.advance_delay_ms / 1000.0, partial(self.on_advance_timeout, self._generation)
                )
        xtrace(
            "answer_resolved",
            {"answer": value, "truth": outcome.question.answer_value, "correct": outcome.correct, "score": self.score},
        )
        self.bus.emit(ANSWER_RESOLVED, outcome)
        return outcome

    # --- clock entry points ---

    def on_tick(self) -> None:
        with self._transition():
            if not self.machine.active:
                return
            ended = self.machine.tick()
            summary = self._finish_session() if ended else None
        if summary is not None:
            self.bus.emit(SESSION_ENDED, summary)

    def on_advance_timeout(self, generation: int) -> None:
        with self._transition():
            if generation != self._generation:
                log.debug("Dropping stale advance (generation %d, now %d)", generation, self._generation)
                return
            self._pending_advance = None
            if not self.machine.active or self.machine.current_question is not None:
                return
            question = self._install_next_question()
        self._publish_question(question)

    # --- internals ---

    @contextmanager
    def _transition(self) -> Iterator[None]:
        if self._in_transition:
            raise InvalidTransition("engine is not reentrant")
        self._in_transition = True
        try:
            yield
        finally:
            self._in_transition = False

    def _invalidate_pending(self) -> None:
        self._generation += 1
        if self._pending_advance is not None:
            self._pending_advance.cancel()
            self._pending_advance = None

    def _install_next_question(self) -> Question:
        question = self.catalog.generate_question(self.machine.difficulty)
        self.machine.set_question(question)
        return question

    def _publish_question(self, question: Question) -> None:
        self.renderer.draw(question.shape)
        self.bus.emit(QUESTION_READY, question)

    def _finish_session(self) -> SessionSummary:
        self._invalidate_pending()
        final = self.machine.score
        beaten = final > self._high_score
        if beaten:
            self._high_score = final
            self._save_high_score(final)
        ended_at = datetime.now(timezone.utc)
        summary = SessionSummary(
            difficulty=self.machine.difficulty,
            final_score=final,
            best_streak=self.machine.best_streak,
            answered=self.machine.answered,
            correct=self.machine.correct,
            started_at=self._started_at or ended_at,
            ended_at=ended_at,
            new_high_score=beaten,
        )
        log.info("Session ended: score %d, best streak %d", final, summary.best_streak)
        xtrace("session_ended", {"score": final, "best_streak": summary.best_streak, "new_high_score": beaten})
        return summary

    def _save_high_score(self, score: int) -> None:
        if self.high_scores is None:
            return
        try:
            self.high_scores.save_high_score(score)
        except StorageUnavailable as exc:
            log.warning("Unable to store high score %d: %s", score, exc)
