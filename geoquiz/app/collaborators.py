from __future__ import annotations

"""Interfaces the engine consumes, plus small in-process implementations."""

import logging
from typing import Any, Callable, Optional, Protocol

from ..errors import StorageUnavailable
from ..quiz.models import ShapeDescriptor

log = logging.getLogger(__name__)


class Renderer(Protocol):
    def draw(self, shape: ShapeDescriptor) -> None: ...


class HighScoreStore(Protocol):
    def load_high_score(self) -> int: ...

    def save_high_score(self, score: int) -> None: ...


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> Cancellable: ...


class NullRenderer:
    def draw(self, shape: ShapeDescriptor) -> None:
        return None


class TextRenderer:
    """Describe a shape in one line of text, for terminals."""

    def __init__(self, out: Callable[[str], Any] = print) -> None:
        self.out = out

    def draw(self, shape: ShapeDescriptor) -> None:
        self.out(describe_shape(shape))


def describe_shape(shape: ShapeDescriptor) -> str:
    p = shape.params
    if shape.kind == "rectangle":
        return f"[rectangle] width {p['width']}, height {p['height']}"
    if shape.kind == "right_triangle":
        text = f"[right triangle] base {p['base']}, height {p['height']}"
        if p.get("show_hypotenuse"):
            text += f", hypotenuse {p['hypotenuse']}"
        return text
    if shape.kind == "circle":
        return f"[circle] radius {p['radius']}"
    if shape.kind == "trapezoid":
        return f"[trapezoid] bases {p['base1']} and {p['base2']}, height {p['height']}"
    if shape.kind == "translation":
        (px, py), (vx, vy) = p["point"], p["vector"]
        return f"[grid] P({px}, {py}) with vector ({vx}, {vy})"
    if shape.kind == "composite_l":
        return (
            f"[L-shape] outer {p['outer_width']}×{p['outer_height']}, "
            f"cut-out {p['cut_width']}×{p['cut_height']}"
        )
    return f"[{shape.kind}] {dict(p)}"


class MemoryHighScoreStore:
    def __init__(self, initial: int = 0) -> None:
        self.value = int(initial)
        self.saves = 0

    def load_high_score(self) -> int:
        return self.value

    def save_high_score(self, score: int) -> None:
        self.value = int(score)
        self.saves += 1


def load_high_score_or_zero(store: Optional[HighScoreStore]) -> int:
    """Read the stored high score; storage problems are logged, not raised."""
    if store is None:
        return 0
    try:
        return max(0, int(store.load_high_score()))
    except StorageUnavailable as exc:
        log.warning("Unable to read high score: %s", exc)
        return 0
