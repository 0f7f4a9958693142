"""Tests for recoil_drift.py"""

import math
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ttklab.services.recoil_drift import (
    AimState, DriftConstants, recoil_step_vector, update_mean_offset,
    drift_cap, draw_stochastic_cap, clamp_to_radius, advance_aim
)
from ttklab.services.rng import RNG
from ttklab.services.stat_mapper import deg2rad, derive_parameters
from ttklab.services.weapon_profile import InvalidProfileError, WeaponProfile


class TestRecoilStep:
    """Tests for the per-shot impulse."""

    def test_vertical_component_is_drift(self):
        dx, dy = recoil_step_vector(0.002, RNG(1))
        assert dy == 0.002

    def test_wobble_bounded(self):
        rng = RNG(4)
        for _ in range(1000):
            dx, dy = recoil_step_vector(0.002, rng)
            assert abs(dx) <= 0.1 * 0.002

    def test_wobble_both_directions(self):
        rng = RNG(4)
        xs = [recoil_step_vector(1.0, rng)[0] for _ in range(200)]
        assert min(xs) < 0 < max(xs)

    def test_uses_one_uniform(self):
        rng = RNG(6)
        reference = RNG(6)
        recoil_step_vector(1.0, rng)
        reference.random()
        assert rng.random() == reference.random()


class TestFeedbackUpdate:
    """Tests for decay plus uncompensated impulse."""

    def test_full_compensation_only_decays(self):
        offset = update_mean_offset((1.0, 2.0), (5.0, 5.0), alpha=1.0, dt=0.1)
        keep = math.exp(-4.0 * 0.1)
        assert offset == pytest.approx((1.0 * keep, 2.0 * keep))

    def test_no_compensation_adds_impulse(self):
        offset = update_mean_offset((0.0, 0.0), (0.1, 0.3), alpha=0.0, dt=0.1)
        assert offset == pytest.approx((0.1, 0.3))

    def test_partial_compensation(self):
        offset = update_mean_offset((0.0, 0.0), (0.0, 1.0), alpha=0.75, dt=0.1)
        assert offset == pytest.approx((0.0, 0.25))

    def test_recovery_rate_configurable(self):
        constants = DriftConstants(recovery_rate=0.0)
        offset = update_mean_offset((1.0, 1.0), (0.0, 0.0), alpha=0.5, dt=0.1, constants=constants)
        assert offset == pytest.approx((1.0, 1.0))


class TestDriftCap:
    """Tests for the mean cap and its stochastic draw."""

    def test_absolute_floor_for_tiny_target(self):
        assert drift_cap(0.0, 0.0, 0.0) == pytest.approx(deg2rad(0.25))
        assert drift_cap(1.0, 1.0, 0.0) == pytest.approx(deg2rad(0.03))

    def test_relative_cap_for_large_target(self):
        # Worst player: 1.6x the angular radius
        assert drift_cap(0.0, 0.0, 1.0) == pytest.approx(1.6)
        # Best player: 0.9x
        assert drift_cap(1.0, 1.0, 1.0) == pytest.approx(0.9)

    def test_better_player_tighter_cap(self):
        assert drift_cap(0.9, 0.8, 0.005) < drift_cap(0.1, 0.2, 0.005)

    def test_stochastic_cap_within_clamp(self):
        rng = RNG(12)
        for _ in range(2000):
            cap = draw_stochastic_cap(1.0, 0.0, rng)
            assert 0.7 <= cap <= 1.5

    def test_perfect_control_has_less_noise(self):
        rng_low = RNG(13)
        rng_high = RNG(13)
        low = [draw_stochastic_cap(1.0, 0.0, rng_low) for _ in range(500)]
        high = [draw_stochastic_cap(1.0, 1.0, rng_high) for _ in range(500)]
        spread = lambda xs: max(xs) - min(xs)
        assert spread(high) < spread(low)

    def test_invalid_constants(self):
        with pytest.raises(InvalidProfileError):
            DriftConstants(cap_mult_min=2.0, cap_mult_max=1.5)


class TestClamp:
    """Tests for radial clamping."""

    def test_inside_unchanged(self):
        assert clamp_to_radius((0.1, 0.2), 1.0) == (0.1, 0.2)

    def test_outside_rescaled_to_cap(self):
        x, y = clamp_to_radius((3.0, 4.0), 2.5)
        assert math.hypot(x, y) == pytest.approx(2.5)
        assert (x, y) == pytest.approx((1.5, 2.0))

    def test_direction_preserved(self):
        x, y = clamp_to_radius((-6.0, 8.0), 1.0)
        assert math.atan2(y, x) == pytest.approx(math.atan2(8.0, -6.0))

    def test_zero_cap(self):
        assert clamp_to_radius((1.0, 1.0), 0.0) == (0.0, 0.0)


class TestAdvanceAim:
    """Tests for the full per-shot update."""

    def setup_method(self):
        profile = WeaponProfile(damage_per_hit=20, rpm=750, distance=50, precision=60,
                                control=20, target_radius=0.25)
        self.params = derive_parameters(profile, 0.25)

    def test_aim_state_reset(self):
        aim = AimState((0.1, 0.2))
        aim.reset()
        assert aim.mean_offset == (0.0, 0.0)
        assert aim.magnitude == 0.0

    def test_drift_is_bounded(self):
        aim = AimState()
        rng = RNG(5)
        mean_cap = drift_cap(self.params.alpha, self.params.control_norm, self.params.r_over_d)
        for _ in range(300):
            advance_aim(aim, self.params, rng)
            assert aim.magnitude <= 1.5 * mean_cap + 1e-15

    def test_drift_climbs_upward(self):
        aim = AimState()
        rng = RNG(5)
        for _ in range(5):
            advance_aim(aim, self.params, rng)
        assert aim.mean_offset[1] > 0

    def test_deterministic(self):
        a, b = AimState(), AimState()
        rng_a, rng_b = RNG(77), RNG(77)
        for _ in range(20):
            advance_aim(a, self.params, rng_a)
            advance_aim(b, self.params, rng_b)
        assert a.mean_offset == b.mean_offset


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
