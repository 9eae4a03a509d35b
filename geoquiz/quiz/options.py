from __future__ import annotations

"""Answer option synthesis: the correct value plus three plausible distractors.

Two strategies are provided. `numeric_options` perturbs a number within a
spread and rounds to a display precision; `coordinate_options` jitters an
integer point. Both dedupe by canonical value key, always contain the correct
answer exactly once and return the four options shuffled with the caller's RNG.
"""

import logging
import random
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Tuple

from ..errors import GenerationExhausted
from .models import Option, OptionSet

log = logging.getLogger(__name__)

OPTION_COUNT = 4
MAX_ATTEMPTS = 500
# Consecutive draws without a new option before the spread is doubled
WIDEN_AFTER = 25


def round_half_up(value: float, digits: int = 0) -> Decimal:
    """Round like a calculator does (0.05 -> 0.1), not banker's rounding."""
    quantum = Decimal(1).scaleb(-digits)
    return Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)


def round_int(value: float) -> int:
    return int(round_half_up(value, 0))


def format_number(value: Decimal, digits: int) -> str:
    if digits == 0:
        return f"{int(value):,}"
    return f"{value:.{digits}f}"


def _value_key(value: Decimal, digits: int) -> str:
    if digits == 0:
        return str(int(value))
    return f"{value:.{digits}f}"


def _finish(options: Dict[str, Option], answer_value: str, rng: random.Random) -> OptionSet:
    items: List[Option] = list(options.values())
    rng.shuffle(items)
    answer_index = next(i for i, o in enumerate(items) if o.value == answer_value)
    return OptionSet(options=tuple(items), answer_index=answer_index, answer_value=answer_value)


def numeric_options(
    correct: float,
    *,
    spread: float = 10,
    digits: int = 0,
    suffix: str = "",
    minimum: float = 1,
    rng: random.Random,
) -> OptionSet:
    """Build four numeric options around `correct`.

    Args:
        correct: The exact answer. It is rounded to `digits` and always kept,
            even when it falls below `minimum`.
        spread: Half-width of the uniform window distractors are drawn from.
        digits: Display precision; 0 means integers.
        suffix: Unit text appended to every label (e.g. " sq units").
        minimum: No distractor may fall below this value.
        rng: Source of randomness.

    Raises:
        ValueError: If `spread` is not positive or `digits` is negative.
        GenerationExhausted: If four unique options are not found within
            MAX_ATTEMPTS draws.
    """
    if spread <= 0:
        raise ValueError(f"spread must be positive, got {spread}")
    if digits < 0:
        raise ValueError(f"digits must be >= 0, got {digits}")

    normalized = round_half_up(correct, digits)
    answer_value = _value_key(normalized, digits)
    options: Dict[str, Option] = {
        answer_value: Option(label=f"{format_number(normalized, digits)}{suffix}", value=answer_value)
    }
    centre = float(normalized)
    floor = Decimal(repr(float(minimum)))
    width = float(spread)
    stale = 0

    for _ in range(MAX_ATTEMPTS):
        if len(options) >= OPTION_COUNT:
            break
        candidate = round_half_up(centre + rng.uniform(-width, width), digits)
        if candidate < floor:
            candidate = round_half_up(float(minimum) + rng.uniform(0, width), digits)
        key = _value_key(candidate, digits)
        if candidate < floor or key in options:
            stale += 1
            if stale >= WIDEN_AFTER:
                width *= 2
                stale = 0
                log.debug("Widening numeric spread to %s around %s", width, answer_value)
            continue
        stale = 0
        options[key] = Option(label=f"{format_number(candidate, digits)}{suffix}", value=key)

    if len(options) < OPTION_COUNT:
        raise GenerationExhausted(
            f"Only {len(options)} unique options for {answer_value} "
            f"(spread={spread}, digits={digits}, minimum={minimum}) after {MAX_ATTEMPTS} draws"
        )
    return _finish(options, answer_value, rng)


def coordinate_options(point: Tuple[int, int], *, spread_range: int = 2, rng: random.Random) -> OptionSet:
    """Build four point options by jittering `point` within +/- `spread_range`."""
    if spread_range < 1:
        raise ValueError(f"spread_range must be >= 1, got {spread_range}")

    x, y = int(point[0]), int(point[1])
    answer_value = f"{x},{y}"
    options: Dict[str, Option] = {answer_value: Option(label=f"({x}, {y})", value=answer_value)}

    for _ in range(MAX_ATTEMPTS):
        if len(options) >= OPTION_COUNT:
            break
        cx = x + rng.randint(-spread_range, spread_range)
        cy = y + rng.randint(-spread_range, spread_range)
        key = f"{cx},{cy}"
        if key not in options:
            options[key] = Option(label=f"({cx}, {cy})", value=key)

    if len(options) < OPTION_COUNT:
        raise GenerationExhausted(
            f"Only {len(options)} unique points around ({x}, {y}) with range {spread_range}"
        )
    return _finish(options, answer_value, rng)
