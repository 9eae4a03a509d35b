from __future__ import annotations

"""Geometry question templates.

Each template has a `build_*` function that turns explicit shape parameters
into a Question, and a `generate_*` function that samples those parameters
from the difficulty range table and calls the builder. Generators are pure
functions of (difficulty, rng).
"""

import random
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Tuple

from .models import ALL_DIFFICULTIES, Difficulty, Question, ShapeDescriptor, TemplateId
from .options import coordinate_options, numeric_options, round_half_up, round_int

# Displayed in prompts and used for every circle computation
PI = 3.14

PYTHAGOREAN_TRIPLES: Tuple[Tuple[int, int, int], ...] = (
    (3, 4, 5),
    (5, 12, 13),
    (6, 8, 10),
    (8, 15, 17),
    (7, 24, 25),
)

Generator = Callable[[Difficulty, random.Random], Question]


@dataclass(frozen=True)
class QuestionTemplate:
    id: TemplateId
    difficulties: FrozenSet[Difficulty]
    generate: Generator

    def supports(self, difficulty: Difficulty) -> bool:
        return difficulty in self.difficulties


def _fmt1(value: float) -> str:
    return f"{round_half_up(value, 1):.1f}"


# --- Rectangle ---

RECTANGLE_AREA_MAX_SIDE = {Difficulty.EASY: 12, Difficulty.MEDIUM: 15, Difficulty.HARD: 20}
RECTANGLE_PERIMETER_MAX_SIDE = {Difficulty.EASY: 12, Difficulty.MEDIUM: 14, Difficulty.HARD: 18}


def _rectangle_shape(width: int, height: int) -> ShapeDescriptor:
    return ShapeDescriptor(
        kind="rectangle",
        params={"width": width, "height": height},
        labels={"width": f"{width} units", "height": f"{height} units"},
    )


def build_rectangle_area(width: int, height: int, rng: random.Random) -> Question:
    area = width * height
    opts = numeric_options(area, spread=max(8, round_int(area * 0.4)), digits=0, suffix=" sq units", minimum=2, rng=rng)
    return Question(
        template_id=TemplateId.RECTANGLE_AREA,
        prompt="What is the area of the rectangle?",
        explanation=f"Area = width × height = {width} × {height} = {area} square units.",
        options=opts.options,
        answer_index=opts.answer_index,
        answer_value=opts.answer_value,
        feedback_success="Correct! You multiplied the side lengths.",
        feedback_error=f"The correct area is {area} square units.",
        shape=_rectangle_shape(width, height),
    )


def generate_rectangle_area(difficulty: Difficulty, rng: random.Random) -> Question:
    top = RECTANGLE_AREA_MAX_SIDE[difficulty]
    return build_rectangle_area(rng.randint(3, top), rng.randint(3, top - 1), rng)


def build_rectangle_perimeter(width: int, height: int, rng: random.Random) -> Question:
    perimeter = 2 * (width + height)
    opts = numeric_options(perimeter, spread=max(6, round_int(perimeter * 0.3)), digits=0, suffix=" units", minimum=4, rng=rng)
    return Question(
        template_id=TemplateId.RECTANGLE_PERIMETER,
        prompt="What is the perimeter of the rectangle?",
        explanation=f"Perimeter = 2(w + h) = 2({width} + {height}) = {perimeter} units.",
        options=opts.options,
        answer_index=opts.answer_index,
        answer_value=opts.answer_value,
        feedback_success="Exactly! You added all the sides.",
        feedback_error=f"Add all four sides to get {perimeter} units.",
        shape=_rectangle_shape(width, height),
    )


def generate_rectangle_perimeter(difficulty: Difficulty, rng: random.Random) -> Question:
    top = RECTANGLE_PERIMETER_MAX_SIDE[difficulty]
    return build_rectangle_perimeter(rng.randint(2, top), rng.randint(2, top), rng)


# --- Triangle ---

TRIANGLE_MAX_BASE = {Difficulty.EASY: 12, Difficulty.MEDIUM: 16, Difficulty.HARD: 22}
TRIANGLE_MAX_HEIGHT = {Difficulty.EASY: 12, Difficulty.MEDIUM: 12, Difficulty.HARD: 18}
# (first triple index, last triple index, max scale factor)
TRIANGLE_TRIPLE_RANGE = {Difficulty.MEDIUM: (0, 2, 2), Difficulty.HARD: (1, 4, 3)}


def build_triangle_area(base: int, height: int, rng: random.Random) -> Question:
    area = 0.5 * base * height
    shown = _fmt1(area)
    opts = numeric_options(area, spread=max(6, round_int(area * 0.5)), digits=1, suffix=" sq units", minimum=2, rng=rng)
    return Question(
        template_id=TemplateId.TRIANGLE_AREA,
        prompt="What is the area of the triangle?",
        explanation=f"Area = 1/2 × base × height = 0.5 × {base} × {height} = {shown} square units.",
        options=opts.options,
        answer_index=opts.answer_index,
        answer_value=opts.answer_value,
        feedback_success="Nice! Triangles use half of base × height.",
        feedback_error=f"Remember 1/2 × {base} × {height} = {shown} square units.",
        shape=ShapeDescriptor(
            kind="right_triangle",
            params={"base": base, "height": height, "show_hypotenuse": False},
            labels={"base": f"base {base}", "height": f"height {height}"},
        ),
    )


def generate_triangle_area(difficulty: Difficulty, rng: random.Random) -> Question:
    base = rng.randint(4, TRIANGLE_MAX_BASE[difficulty])
    height = rng.randint(3, TRIANGLE_MAX_HEIGHT[difficulty])
    return build_triangle_area(base, height, rng)


def build_triangle_perimeter(a: int, b: int, c: int, rng: random.Random) -> Question:
    perimeter = a + b + c
    opts = numeric_options(perimeter, spread=max(8, round_int(perimeter * 0.3)), digits=0, suffix=" units", minimum=6, rng=rng)
    return Question(
        template_id=TemplateId.TRIANGLE_PERIMETER,
        prompt="What is the perimeter of the right triangle?",
        explanation=f"Perimeter = {a} + {b} + {c} = {perimeter} units.",
        options=opts.options,
        answer_index=opts.answer_index,
        answer_value=opts.answer_value,
        feedback_success="Great! You added all three sides.",
        feedback_error=f"Add {a}, {b}, and {c} to get {perimeter} units.",
        shape=ShapeDescriptor(
            kind="right_triangle",
            params={"base": a, "height": b, "hypotenuse": c, "show_hypotenuse": True},
            labels={"base": str(a), "height": str(b), "hypotenuse": str(c)},
        ),
    )


def generate_triangle_perimeter(difficulty: Difficulty, rng: random.Random) -> Question:
    first, last, max_scale = TRIANGLE_TRIPLE_RANGE[difficulty]
    a, b, c = PYTHAGOREAN_TRIPLES[rng.randint(first, last)]
    k = rng.randint(1, max_scale)
    return build_triangle_perimeter(a * k, b * k, c * k, rng)


# --- Circle ---

CIRCLE_AREA_MAX_RADIUS = {Difficulty.MEDIUM: 10, Difficulty.HARD: 14}
CIRCUMFERENCE_MAX_RADIUS = {Difficulty.MEDIUM: 12, Difficulty.HARD: 16}


def _circle_shape(radius: int) -> ShapeDescriptor:
    return ShapeDescriptor(kind="circle", params={"radius": radius}, labels={"radius": f"r = {radius}"})


def build_circle_area(radius: int, rng: random.Random) -> Question:
    area = float(round_half_up(PI * radius * radius, 1))
    shown = _fmt1(area)
    opts = numeric_options(area, spread=max(10, round_int(area * 0.35)), digits=1, suffix=" sq units", minimum=10, rng=rng)
    return Question(
        template_id=TemplateId.CIRCLE_AREA,
        prompt="Use π ≈ 3.14. What is the area of the circle?",
        explanation=f"Area = πr² = 3.14 × {radius}² = {shown} square units.",
        options=opts.options,
        answer_index=opts.answer_index,
        answer_value=opts.answer_value,
        feedback_success="Exactly! Multiply π by the radius squared.",
        feedback_error=f"Compute 3.14 × {radius} × {radius} = {shown} square units.",
        shape=_circle_shape(radius),
    )


def generate_circle_area(difficulty: Difficulty, rng: random.Random) -> Question:
    return build_circle_area(rng.randint(3, CIRCLE_AREA_MAX_RADIUS[difficulty]), rng)


def build_circle_circumference(radius: int, rng: random.Random) -> Question:
    circumference = float(round_half_up(2 * PI * radius, 1))
    shown = _fmt1(circumference)
    opts = numeric_options(
        circumference, spread=max(8, round_int(circumference * 0.3)), digits=1, suffix=" units", minimum=15, rng=rng
    )
    return Question(
        template_id=TemplateId.CIRCLE_CIRCUMFERENCE,
        prompt="Use π ≈ 3.14. What is the circumference of the circle?",
        explanation=f"Circumference = 2πr = 2 × 3.14 × {radius} = {shown} units.",
        options=opts.options,
        answer_index=opts.answer_index,
        answer_value=opts.answer_value,
        feedback_success="Yes! Circumference equals 2π times the radius.",
        feedback_error=f"Multiply 2 × 3.14 × {radius} to get {shown} units.",
        shape=_circle_shape(radius),
    )


def generate_circle_circumference(difficulty: Difficulty, rng: random.Random) -> Question:
    return build_circle_circumference(rng.randint(3, CIRCUMFERENCE_MAX_RADIUS[difficulty]), rng)


# --- Trapezoid ---

TRAPEZOID_MAX_BASE = {Difficulty.MEDIUM: 14, Difficulty.HARD: 20}
TRAPEZOID_MAX_HEIGHT = {Difficulty.MEDIUM: 10, Difficulty.HARD: 14}


def build_trapezoid_area(base1: int, base2: int, height: int, rng: random.Random) -> Question:
    if base2 >= base1:
        raise ValueError(f"trapezoid top base must be shorter: base1={base1}, base2={base2}")
    area = 0.5 * (base1 + base2) * height
    shown = _fmt1(area)
    opts = numeric_options(area, spread=max(10, round_int(area * 0.35)), digits=1, suffix=" sq units", minimum=12, rng=rng)
    return Question(
        template_id=TemplateId.TRAPEZOID_AREA,
        prompt="What is the area of the trapezoid?",
        explanation=f"Area = 1/2 × ({base1} + {base2}) × {height} = {shown} square units.",
        options=opts.options,
        answer_index=opts.answer_index,
        answer_value=opts.answer_value,
        feedback_success="Correct! Average the bases, then multiply by height.",
        feedback_error=f"Compute 0.5 × ({base1} + {base2}) × {height} = {shown} square units.",
        shape=ShapeDescriptor(
            kind="trapezoid",
            params={"base1": base1, "base2": base2, "height": height},
            labels={"base1": f"b1 = {base1}", "base2": f"b2 = {base2}", "height": f"h = {height}"},
        ),
    )


def generate_trapezoid_area(difficulty: Difficulty, rng: random.Random) -> Question:
    base1 = rng.randint(6, TRAPEZOID_MAX_BASE[difficulty])
    base2 = rng.randint(4, base1 - 1)
    height = rng.randint(4, TRAPEZOID_MAX_HEIGHT[difficulty])
    return build_trapezoid_area(base1, base2, height, rng)


# --- Translation ---

TRANSLATION_GRID = {Difficulty.MEDIUM: 4, Difficulty.HARD: 6}
VECTOR_MIN, VECTOR_MAX = -3, 4
TRANSLATION_OPTION_RANGE = 3


def build_translation(point: Tuple[int, int], vector: Tuple[int, int], rng: random.Random) -> Question:
    if vector == (0, 0):
        raise ValueError("translation vector must not be (0, 0)")
    (px, py), (vx, vy) = point, vector
    ix, iy = px + vx, py + vy
    opts = coordinate_options((ix, iy), spread_range=TRANSLATION_OPTION_RANGE, rng=rng)
    return Question(
        template_id=TemplateId.TRANSLATION,
        prompt=f"Point P({px}, {py}) is translated by vector ({vx}, {vy}). Where is P'?",
        explanation=f"Add the vector: ({px} + {vx}, {py} + {vy}) = ({ix}, {iy}).",
        options=opts.options,
        answer_index=opts.answer_index,
        answer_value=opts.answer_value,
        feedback_success="Nice! You added each component of the vector.",
        feedback_error=f"Translate by adding {vx} and {vy} to get ({ix}, {iy}).",
        shape=ShapeDescriptor(
            kind="translation",
            params={"point": (px, py), "vector": (vx, vy), "image": (ix, iy)},
            labels={"point": "P", "image": "P'"},
        ),
    )


def generate_translation(difficulty: Difficulty, rng: random.Random) -> Question:
    grid = TRANSLATION_GRID[difficulty]
    point = (rng.randint(-grid, grid), rng.randint(-grid, grid))
    vector = (0, 0)
    while vector == (0, 0):
        vector = (rng.randint(VECTOR_MIN, VECTOR_MAX), rng.randint(VECTOR_MIN, VECTOR_MAX))
    return build_translation(point, vector, rng)


# --- Composite L-shape ---


def build_composite_area(outer_w: int, outer_h: int, cut_w: int, cut_h: int, rng: random.Random) -> Question:
    if cut_w > outer_w // 2 or cut_h > outer_h // 2:
        raise ValueError("cut-out must be at most half of the outer rectangle in each dimension")
    area = outer_w * outer_h - cut_w * cut_h
    opts = numeric_options(area, spread=max(12, round_int(area * 0.25)), digits=0, suffix=" sq units", minimum=20, rng=rng)
    return Question(
        template_id=TemplateId.COMPOSITE_AREA,
        prompt="What is the area of the L-shaped figure?",
        explanation=f"Subtract the missing rectangle: {outer_w}×{outer_h} − {cut_w}×{cut_h} = {area} square units.",
        options=opts.options,
        answer_index=opts.answer_index,
        answer_value=opts.answer_value,
        feedback_success="Correct! Subtract the missing part from the large rectangle.",
        feedback_error=f"Take {outer_w}×{outer_h} minus {cut_w}×{cut_h} for {area} square units.",
        shape=ShapeDescriptor(
            kind="composite_l",
            params={"outer_width": outer_w, "outer_height": outer_h, "cut_width": cut_w, "cut_height": cut_h},
            labels={
                "outer_width": str(outer_w),
                "outer_height": str(outer_h),
                "cut_width": str(cut_w),
                "cut_height": str(cut_h),
            },
        ),
    )


def generate_composite_area(difficulty: Difficulty, rng: random.Random) -> Question:
    outer_w = rng.randint(16, 24)
    outer_h = rng.randint(12, 18)
    cut_w = rng.randint(5, outer_w // 2)
    cut_h = rng.randint(4, outer_h // 2)
    return build_composite_area(outer_w, outer_h, cut_w, cut_h, rng)


_MEDIUM_UP = frozenset({Difficulty.MEDIUM, Difficulty.HARD})

TEMPLATES: Dict[TemplateId, QuestionTemplate] = {
    t.id: t
    for t in (
        QuestionTemplate(TemplateId.RECTANGLE_AREA, ALL_DIFFICULTIES, generate_rectangle_area),
        QuestionTemplate(TemplateId.RECTANGLE_PERIMETER, ALL_DIFFICULTIES, generate_rectangle_perimeter),
        QuestionTemplate(TemplateId.TRIANGLE_AREA, ALL_DIFFICULTIES, generate_triangle_area),
        QuestionTemplate(TemplateId.TRIANGLE_PERIMETER, _MEDIUM_UP, generate_triangle_perimeter),
        QuestionTemplate(TemplateId.CIRCLE_AREA, _MEDIUM_UP, generate_circle_area),
        QuestionTemplate(TemplateId.CIRCLE_CIRCUMFERENCE, _MEDIUM_UP, generate_circle_circumference),
        QuestionTemplate(TemplateId.TRAPEZOID_AREA, _MEDIUM_UP, generate_trapezoid_area),
        QuestionTemplate(TemplateId.TRANSLATION, _MEDIUM_UP, generate_translation),
        QuestionTemplate(TemplateId.COMPOSITE_AREA, frozenset({Difficulty.HARD}), generate_composite_area),
    )
}
