from __future__ import annotations

"""Value objects shared by question templates, the catalog and the engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Tuple


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "Difficulty | str") -> "Difficulty":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


ALL_DIFFICULTIES = frozenset(Difficulty)


class TemplateId(str, Enum):
    RECTANGLE_AREA = "rectangle-area"
    RECTANGLE_PERIMETER = "rectangle-perimeter"
    TRIANGLE_AREA = "triangle-area"
    TRIANGLE_PERIMETER = "triangle-perimeter"
    CIRCLE_AREA = "circle-area"
    CIRCLE_CIRCUMFERENCE = "circle-circumference"
    TRAPEZOID_AREA = "trapezoid-area"
    TRANSLATION = "translation"
    COMPOSITE_AREA = "composite-area"


@dataclass(frozen=True)
class Option:
    label: str
    value: str


@dataclass(frozen=True)
class ShapeDescriptor:
    """Renderer input: shape kind, its dimensions and display captions.

    The engine never looks inside; renderers decide how to draw it.
    """

    kind: str
    params: Mapping[str, Any] = field(default_factory=dict)
    labels: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class OptionSet:
    options: Tuple[Option, ...]
    answer_index: int
    answer_value: str


@dataclass(frozen=True)
class Question:
    """One multiple-choice round, immutable once built."""

    template_id: TemplateId
    prompt: str
    explanation: str
    options: Tuple[Option, ...]
    answer_index: int
    answer_value: str
    feedback_success: str
    feedback_error: str
    shape: ShapeDescriptor

    def __post_init__(self) -> None:
        if len(self.options) != 4:
            raise ValueError(f"Question needs exactly 4 options, got {len(self.options)}")
        values = [o.value for o in self.options]
        if len(set(values)) != len(values):
            raise ValueError(f"Option values must be distinct: {values}")
        if not 0 <= self.answer_index < len(self.options):
            raise ValueError(f"answer_index out of range: {self.answer_index}")
        if self.options[self.answer_index].value != self.answer_value:
            raise ValueError("answer_value does not match the option at answer_index")

    @property
    def correct_option(self) -> Option:
        return self.options[self.answer_index]

    def is_correct(self, value: str) -> bool:
        return value == self.answer_value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "template_id": self.template_id.value,
            "prompt": self.prompt,
            "explanation": self.explanation,
            "options": [{"label": o.label, "value": o.value} for o in self.options],
            "answer_index": self.answer_index,
            "answer_value": self.answer_value,
            "feedback": {"success": self.feedback_success, "error": self.feedback_error},
            "shape": {"kind": self.shape.kind, "params": dict(self.shape.params), "labels": dict(self.shape.labels)},
        }
