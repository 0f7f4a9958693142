"""Tests for hit_probability.py"""

import math
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ttklab.services.hit_probability import estimate_hit_probability, sigma_total_for_shot
from ttklab.services.rng import RNG


def centered_hit_probability(sigma, radius):
    """Closed form for a centered isotropic Gaussian (Rayleigh CDF)."""
    return 1.0 - math.exp(-radius ** 2 / (2.0 * sigma ** 2))


class TestZeroSpread:
    """Exact case when sigma <= 0."""

    def test_inside_is_certain_hit(self):
        assert estimate_hit_probability((0.001, 0.0), 0.0, 0.005, 800, RNG(1)) == 1.0

    def test_outside_is_certain_miss(self):
        assert estimate_hit_probability((0.006, 0.0), 0.0, 0.005, 800, RNG(1)) == 0.0

    def test_boundary_counts_as_hit(self):
        assert estimate_hit_probability((3.0, 4.0), 0.0, 5.0, 800, RNG(1)) == 1.0

    def test_negative_sigma_is_exact_case(self):
        assert estimate_hit_probability((0.0, 0.0), -1.0, 0.005, 800, RNG(1)) == 1.0

    def test_draws_no_random_numbers(self):
        rng = RNG(5)
        state = rng._state
        estimate_hit_probability((0.0, 0.0), 0.0, 0.005, 800, rng)
        assert rng._state == state
        assert rng.has_spare is False


class TestMonteCarlo:
    """Monte Carlo estimate against the closed form."""

    def test_centered_high_probability(self):
        sigma = 1.0
        radius = math.sqrt(-2.0 * math.log(0.1))  # p = 0.9
        p = estimate_hit_probability((0.0, 0.0), sigma, radius, 800, RNG(42))
        assert p == pytest.approx(centered_hit_probability(sigma, radius), abs=0.05)

    def test_centered_median_radius(self):
        sigma = 0.002
        radius = sigma * math.sqrt(2.0 * math.log(2.0))  # p = 0.5
        p = estimate_hit_probability((0.0, 0.0), sigma, radius, 4000, RNG(7))
        assert p == pytest.approx(0.5, abs=0.05)

    def test_far_offset_misses(self):
        p = estimate_hit_probability((10.0, 0.0), 1.0, 1.0, 800, RNG(3))
        assert p == 0.0

    def test_offset_lowers_probability(self):
        centered = estimate_hit_probability((0.0, 0.0), 1.0, 1.5, 2000, RNG(8))
        shifted = estimate_hit_probability((1.5, 0.0), 1.0, 1.5, 2000, RNG(8))
        assert shifted < centered

    def test_result_is_sample_fraction(self):
        p = estimate_hit_probability((0.0, 0.0), 1.0, 1.0, 37, RNG(2))
        assert 0.0 <= p <= 1.0
        assert round(p * 37) == pytest.approx(p * 37)

    def test_consumes_two_gaussians_per_sample(self):
        rng = RNG(21)
        reference = RNG(21)
        estimate_hit_probability((0.0, 0.0), 1.0, 1.0, 10, rng)
        for _ in range(20):
            reference.gauss()
        assert rng.gauss() == reference.gauss()

    def test_deterministic(self):
        a = estimate_hit_probability((0.001, 0.002), 0.003, 0.004, 800, RNG(10))
        b = estimate_hit_probability((0.001, 0.002), 0.003, 0.004, 800, RNG(10))
        assert a == b

    def test_invalid_sample_count(self):
        with pytest.raises(ValueError):
            estimate_hit_probability((0.0, 0.0), 1.0, 1.0, 0, RNG(1))


class TestTotalSpread:
    """Tests for sigma_total_for_shot."""

    def test_quadrature_sum(self):
        assert sigma_total_for_shot(3.0, 4.0, 0.0) == pytest.approx(5.0)

    def test_zero(self):
        assert sigma_total_for_shot(0.0, 0.0, 0.0) == 0.0

    def test_player_jitter_widens(self):
        assert sigma_total_for_shot(1.0, 1.0, 1.0) > sigma_total_for_shot(1.0, 1.0, 0.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
