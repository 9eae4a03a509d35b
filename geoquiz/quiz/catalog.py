from __future__ import annotations

"""Question catalog.

Lists templates, filters them by difficulty and instantiates one question per
round from a uniformly chosen template.
"""

import logging
import random
from typing import Dict, Iterable, List, Optional

from ..app.explain import trace as xtrace
from .models import Difficulty, Question, TemplateId
from .templates import TEMPLATES, QuestionTemplate

log = logging.getLogger(__name__)


class QuestionCatalog:
    def __init__(self, templates: Optional[Iterable[QuestionTemplate]] = None, rng: Optional[random.Random] = None) -> None:
        items = list(templates) if templates is not None else list(TEMPLATES.values())
        if not items:
            raise ValueError("QuestionCatalog needs at least one template")
        self._templates: Dict[TemplateId, QuestionTemplate] = {t.id: t for t in items}
        self.rng = rng or random.Random()

    def list_templates(self) -> List[QuestionTemplate]:
        return list(self._templates.values())

    def get_template(self, template_id: TemplateId | str) -> QuestionTemplate:
        tid = TemplateId(template_id)
        try:
            return self._templates[tid]
        except KeyError:
            raise KeyError(f"Unknown template id: {tid.value}") from None

    def templates_for(self, difficulty: Difficulty | str) -> List[QuestionTemplate]:
        level = Difficulty.parse(difficulty)
        return [t for t in self._templates.values() if t.supports(level)]

    def generate_question(self, difficulty: Difficulty | str) -> Question:
        """Pick a template that supports `difficulty` and build a question from it.

        Raises:
            ValueError: If `difficulty` is unknown or no template supports it.
            GenerationExhausted: Propagated from option synthesis.
        """
        level = Difficulty.parse(difficulty)
        candidates = self.templates_for(level)
        if not candidates:
            raise ValueError(f"No templates support difficulty '{level.value}'")
        template = self.rng.choice(candidates)
        question = template.generate(level, self.rng)
        log.debug("Generated %s question (%s)", template.id.value, level.value)
        xtrace("question_generated", {"template": template.id.value, "difficulty": level.value, "answer": question.answer_value})
        return question
