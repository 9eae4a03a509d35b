"""geoquiz: a timed multiple-choice geometry quiz engine.

Generates shape questions with plausible distractors and runs the scoring,
streak and timer state machine for a single local session. Rendering, input
handling and high score storage are supplied by the caller.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
