from __future__ import annotations

"""CLI for geoquiz: a text-mode front end over QuizEngine."""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .. import __version__
from ..config.config import load_config, validate_config
from ..errors import ConfigError, StorageUnavailable
from ..quiz.catalog import QuestionCatalog
from ..quiz.models import Difficulty, Question
from ..stats.stats import format_clock, format_scoreboard, format_summary, summary_to_record
from ..storage.highscore import JsonHighScoreStore
from ..storage.store import load_all, query_trend, record_session
from ..util.randomness import make_rng
from .clock import CooperativeClock
from .collaborators import TextRenderer, describe_shape
from .events import ANSWER_RESOLVED, QUESTION_READY, SESSION_ENDED
from .explain import enable as explain_enable
from .quiz_engine import QuizEngine, SessionSummary
from .session_state import AnswerOutcome, SessionStateMachine

log = logging.getLogger(__name__)

DIFFICULTY_CHOICES = [d.value for d in Difficulty]


def _setup_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_cfg(path: Optional[str]) -> Dict[str, Any]:
    return validate_config(load_config(path))


def _print_question(question: Question, index: int) -> None:
    print(f"\nQ{index}: {question.prompt}")
    for i, opt in enumerate(question.options, start=1):
        print(f"  {i}) {opt.label}")


def _parse_choice(raw: str, question: Question) -> Optional[str]:
    token = raw.strip()
    if token.isdigit() and 1 <= int(token) <= len(question.options):
        return question.options[int(token) - 1].value
    return None


def _wait_for_next_question(engine: QuizEngine, clock: CooperativeClock, sleep: Callable[[float], None]) -> None:
    while engine.active and engine.current_question is None:
        due = clock.next_due()
        if due is None:
            break
        sleep(max(0.0, due - clock.now()))
        clock.run_due()


def play(cfg: Dict[str, Any], difficulty: str, *, read: Callable[[str], str] = input, sleep: Callable[[float], None] = time.sleep) -> int:
    session_cfg = cfg["session"]
    storage_cfg = cfg["storage"]
    rng = make_rng(session_cfg.get("seed"))
    clock = CooperativeClock()
    engine = QuizEngine(
        QuestionCatalog(rng=rng),
        scheduler=clock,
        high_scores=JsonHighScoreStore(storage_cfg["high_score_path"]),
        renderer=TextRenderer(),
        machine=SessionStateMachine(total_time_s=session_cfg["total_time_s"]),
        advance_delay_ms=session_cfg["advance_delay_ms"],
    )
    counter = {"n": 0}

    def on_question(q: Question) -> None:
        counter["n"] += 1
        _print_question(q, counter["n"])

    def on_answer(outcome: AnswerOutcome) -> None:
        mark = "✅" if outcome.correct else "❌"
        print(f"{mark} {outcome.feedback}")
        print(f"   {outcome.explanation}")
        print(f"   {format_scoreboard(engine.snapshot(), engine.high_score)}")

    def on_end(summary: SessionSummary) -> None:
        print("\nTime is up!")
        print(format_summary(summary, engine.high_score))
        if storage_cfg["record_history"]:
            try:
                record_session(summary_to_record(summary), Path(storage_cfg["data_dir"]))
            except StorageUnavailable as exc:
                log.warning("Session history not saved: %s", exc)

    engine.bus.subscribe(QUESTION_READY, on_question)
    engine.bus.subscribe(ANSWER_RESOLVED, on_answer)
    engine.bus.subscribe(SESSION_ENDED, on_end)

    print(f"geoquiz {__version__}: {difficulty} session, {format_clock(session_cfg['total_time_s'])} on the clock.")
    print("Answer with 1-4; 'q' quits.")
    ticker = clock.call_every(1.0, engine.on_tick)
    engine.start(difficulty)
    try:
        while engine.active:
            try:
                raw = read(f"[{format_clock(engine.time_remaining)}] choice: ")
            except EOFError:
                raw = "q"
            clock.run_due()
            if not engine.active:
                break
            if raw.strip().lower() in ("q", "quit", "exit"):
                engine.reset()
                print("Session abandoned.")
                break
            question = engine.current_question
            if question is None:
                continue
            value = _parse_choice(raw, question)
            if value is None:
                print("Enter a number from 1 to 4.")
                continue
            engine.submit_answer(value)
            _wait_for_next_question(engine, clock, sleep)
    finally:
        ticker.cancel()
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="geoquiz", description="Timed geometry quiz")
    p.add_argument("--version", action="version", version=f"geoquiz {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    lt = sub.add_parser("list-templates", help="List question templates")
    lt.add_argument("--difficulty", choices=DIFFICULTY_CHOICES, default=None)

    sp = sub.add_parser("sample", help="Print one generated question with its answer")
    sp.add_argument("--difficulty", choices=DIFFICULTY_CHOICES, default="easy")
    sp.add_argument("--seed", type=int, default=None)
    sp.add_argument("--json", action="store_true", help="Print the question as JSON")

    pp = sub.add_parser("play", help="Play a timed session in the terminal")
    pp.add_argument("--config", default=None)
    pp.add_argument("--difficulty", choices=DIFFICULTY_CHOICES, default=None)
    pp.add_argument("--seed", type=int, default=None)
    pp.add_argument("--explain", action="store_true")
    pp.add_argument("--verbose", action="store_true")

    hp = sub.add_parser("history", help="Show past sessions")
    hp.add_argument("--config", default=None)
    hp.add_argument("--difficulty", choices=DIFFICULTY_CHOICES, default=None)

    rp = sub.add_parser("report", help="Write progress plots")
    rp.add_argument("--config", default=None)
    rp.add_argument("--out", default="reports")

    args = p.parse_args(argv)

    if args.cmd == "list-templates":
        catalog = QuestionCatalog()
        templates = catalog.templates_for(args.difficulty) if args.difficulty else catalog.list_templates()
        for t in templates:
            levels = ", ".join(d.value for d in Difficulty if d in t.difficulties)
            print(f"{t.id.value}: {levels}")
        return 0

    if args.cmd == "sample":
        catalog = QuestionCatalog(rng=make_rng(args.seed))
        q = catalog.generate_question(args.difficulty)
        if args.json:
            print(json.dumps(q.to_dict(), ensure_ascii=False, indent=2))
            return 0
        print(describe_shape(q.shape))
        _print_question(q, 1)
        print(f"Answer: {q.answer_index + 1}) {q.correct_option.label}")
        print(q.explanation)
        return 0

    try:
        cfg = _load_cfg(getattr(args, "config", None))
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.cmd == "play":
        _setup_logging(cfg["logging"]["level"], args.verbose)
        if args.explain:
            explain_enable(True)
        if args.seed is not None:
            cfg["session"]["seed"] = args.seed
        return play(cfg, args.difficulty or cfg["session"]["difficulty"])

    if args.cmd == "history":
        df = load_all(Path(cfg["storage"]["data_dir"]))
        if args.difficulty:
            df = query_trend(df, difficulty=args.difficulty)
        if df.empty:
            print("No sessions recorded yet.")
            return 0
        cols = ["session_start", "difficulty", "score", "best_streak", "correct", "answered", "accuracy"]
        print(df[[c for c in cols if c in df.columns]].to_string(index=False))
        return 0

    if args.cmd == "report":
        from ..analytics import AnalyticsConfig, ewma_by_session, load_and_prepare
        from ..analytics.plots import plot_difficulty_bars, plot_trend

        acfg = AnalyticsConfig()
        df = load_and_prepare(Path(cfg["storage"]["data_dir"]), acfg)
        if df.empty:
            print("No sessions recorded yet.")
            return 0
        df = ewma_by_session(df, value_col="score", span=acfg.smoothing_span, group_cols=["difficulty"])
        outdir = Path(args.out)
        outdir.mkdir(parents=True, exist_ok=True)
        written = []
        for level in DIFFICULTY_CHOICES:
            path = outdir / f"trend_{level}.png"
            if plot_trend(df, difficulty=level, value_col="score", save_path=path):
                written.append(path)
        path = outdir / "accuracy_by_difficulty.png"
        if plot_difficulty_bars(df, value_col="accuracy", save_path=path):
            written.append(path)
        for w in written:
            print(f"Wrote {w}")
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
