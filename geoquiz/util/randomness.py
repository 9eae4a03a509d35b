from __future__ import annotations

"""Randomness helpers: explicit, seedable generators.

Question generation and option shuffling always take a `random.Random`
instance; nothing in the package touches the module-level RNG.
"""

import os
import random
from typing import Optional


def resolve_seed(seed: Optional[int] = None) -> Optional[int]:
    """Return `seed` if given, else the SEED env var as int, else None."""
    if seed is not None:
        return int(seed)
    env = os.environ.get("SEED")
    if env is None:
        return None
    try:
        return int(env)
    except ValueError:
        return None


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Build a generator seeded from `seed` or the SEED env var (unseeded otherwise)."""
    return random.Random(resolve_seed(seed))
