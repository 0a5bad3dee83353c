"""Bell-curve power sampling for evil yetis: pure math, no I/O.

Opponent power is a fraction of the player's snowballs drawn from a clamped
normal distribution (Box-Muller). With the default tuning:

  ~68% of yetis land within 1 std dev (70%-100% of player power)
  ~95% within 2 std dev (55%-115%)
  everything else is clamped to the 50%-120% band
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass, field

DEFAULT_CENTER = 0.85
DEFAULT_MIN = 0.5
DEFAULT_MAX = 1.2
DEFAULT_STD_DEV = 0.15


def _nonzero_uniform(rng: random.Random) -> float:
    # random() is [0, 1); log(0) is undefined
    u = 0.0
    while u == 0.0:
        u = rng.random()
    return u


def standard_normal(rng: random.Random | None = None) -> float:
    """Draw one standard normal variate with the Box-Muller transform."""
    rng = rng or random
    u = _nonzero_uniform(rng)
    v = _nonzero_uniform(rng)
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


def sample(
    center: float = DEFAULT_CENTER,
    minimum: float = DEFAULT_MIN,
    maximum: float = DEFAULT_MAX,
    std_dev: float = DEFAULT_STD_DEV,
    rng: random.Random | None = None,
) -> float:
    """Return ``clamp(center + z * std_dev, minimum, maximum)``.

    Expects ``minimum < center < maximum`` and ``std_dev > 0``; inputs are not
    checked here (the config layer validates them).
    """
    z = standard_normal(rng)
    return max(minimum, min(maximum, center + z * std_dev))


def power_from_fraction(fraction: float, player_power: int | float) -> int:
    return int(math.floor(fraction * player_power))


def estimate_power_range(
    player_power: int | float,
    minimum: float = DEFAULT_MIN,
    maximum: float = DEFAULT_MAX,
) -> tuple[int, int]:
    """Displayable (low, high) range for a yeti before it is engaged."""
    return power_from_fraction(minimum, player_power), power_from_fraction(maximum, player_power)


@dataclass
class CurveStats:
    samples: int
    minimum: float
    maximum: float
    mean: float
    histogram: list[int] = field(default_factory=list)
    bin_edges: list[float] = field(default_factory=list)


def distribution_stats(
    samples: int = 1000,
    center: float = DEFAULT_CENTER,
    minimum: float = DEFAULT_MIN,
    maximum: float = DEFAULT_MAX,
    std_dev: float = DEFAULT_STD_DEV,
    bins: int = 10,
    rng: random.Random | None = None,
) -> CurveStats:
    """Draw ``samples`` values and summarize them for tuning checks."""
    if samples < 1:
        raise ValueError(f"samples must be positive, got {samples}")
    if bins < 1:
        raise ValueError(f"bins must be positive, got {bins}")

    values = [sample(center, minimum, maximum, std_dev, rng) for _ in range(samples)]
    lo, hi = min(values), max(values)
    width = (hi - lo) / bins
    histogram = [0] * bins
    for value in values:
        idx = bins - 1 if width == 0 else min(int((value - lo) / width), bins - 1)
        histogram[idx] += 1

    return CurveStats(
        samples=samples,
        minimum=lo,
        maximum=hi,
        mean=sum(values) / samples,
        histogram=histogram,
        bin_edges=[lo + i * width for i in range(bins + 1)],
    )
