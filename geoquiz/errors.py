from __future__ import annotations

"""Exception types raised by the quiz engine and its collaborators."""


class QuizError(Exception):
    """Base class for geoquiz errors."""


class InvalidTransition(QuizError):
    """A session event arrived in a state that cannot accept it.

    Examples: submitting an answer while idle, ticking a stopped session,
    installing a second question while one is still in flight.
    """


class GenerationExhausted(QuizError):
    """Option synthesis could not produce four unique options.

    Raised after the bounded resampling loop gives up. It means a template's
    parameter ranges are too narrow, so it is not recovered.
    """


class StorageUnavailable(QuizError):
    """High score or history storage could not be read or written."""


class ConfigError(QuizError):
    """Configuration file is missing or malformed."""
