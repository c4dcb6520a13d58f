"""Helper utilities for Nancymon."""

import math
import random

# Unseeded by default; callers inject their own source for control.
_default_rng = random.Random()


def get_rng(rng: random.Random | None = None) -> random.Random:
    """Return the given randomness source, or the shared default one."""
    return rng if rng is not None else _default_rng


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's built-in round() uses banker's rounding, which would make
    e.g. 12.5 -> 12; battle numbers always round .5 up.
    """
    return int(math.floor(value + 0.5))


def scale_floor(amount: int, multiplier: float) -> int:
    """Scale an integer amount and floor the result."""
    return int(math.floor(amount * multiplier))


def clamp(value: int, low: int, high: int) -> int:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def weighted_random_choice(weights: dict, rng: random.Random | None = None) -> str:
    """Select a random key based on weights.

    Args:
        weights: Dict of {choice: weight} where weights sum to 1.0
        rng: Optional randomness source

    Returns:
        Selected choice key.
    """
    choices = list(weights.keys())
    probabilities = list(weights.values())
    return get_rng(rng).choices(choices, weights=probabilities, k=1)[0]


def xp_threshold(level: int, xp_per_level: int = 100) -> int:
    """XP needed to go from `level` to the next one."""
    return level * xp_per_level
