"""Per-shot hit probability.

A shot lands at the current aim mean plus isotropic Gaussian spread. The
chance that it falls inside the target's angular radius is a non-central
chi-square containment probability, estimated here by sampling.
"""

import math
from typing import Tuple

from .rng import RNG

Vec2 = Tuple[float, float]

DEFAULT_SAMPLE_COUNT = 800


def sigma_total_for_shot(sigma0: float, bloom: float, sigma_player: float) -> float:
    """Angular std dev of one shot (radians).

    Base spread, bloom and player jitter are independent, so their variances
    add. Bloom is per-shot, not cumulative; pattern growth is carried by the
    drift of the aim mean instead.
    """
    return math.sqrt(sigma0 ** 2 + bloom ** 2 + sigma_player ** 2)


def estimate_hit_probability(
    mean_offset: Vec2,
    sigma: float,
    target_angular_radius: float,
    sample_count: int,
    rng: RNG
) -> float:
    """Estimate the probability that one shot hits.

    Args:
        mean_offset: Current aim mean (x, y) in radians
        sigma: Total per-shot spread in radians
        target_angular_radius: Target radius over distance (radians)
        sample_count: Monte Carlo samples; ignored when sigma <= 0
        rng: Random source, advanced by 2 * sample_count gaussian draws

    Returns:
        Hit probability in [0, 1]. Exact 0.0 or 1.0 when sigma <= 0.
    """
    mx, my = mean_offset
    r2 = target_angular_radius * target_angular_radius

    if sigma <= 0:
        return 1.0 if mx * mx + my * my <= r2 else 0.0

    if sample_count < 1:
        raise ValueError(f"sample_count must be >= 1, got {sample_count}")

    hits = 0
    for _ in range(sample_count):
        x = mx + sigma * rng.gauss()
        y = my + sigma * rng.gauss()
        if x * x + y * y <= r2:
            hits += 1
    return hits / sample_count
