"""Question generation layer: models, option synthesis, templates and catalog."""

from .models import Difficulty, Option, OptionSet, Question, ShapeDescriptor, TemplateId  # noqa: F401
from .catalog import QuestionCatalog  # noqa: F401
