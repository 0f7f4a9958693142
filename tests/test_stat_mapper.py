"""Tests for stat_mapper.py and weapon_profile.py"""

import math
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ttklab.services.stat_mapper import (
    MapperConstants, normalize, deg2rad, map_precision_to_bloom,
    map_control_to_drift, control_norm, alpha_from_skill, derive_parameters
)
from ttklab.services.weapon_profile import WeaponProfile, InvalidProfileError


def make_profile(**overrides):
    values = dict(damage_per_hit=20, rpm=750, distance=50, precision=60, control=50,
                  hp=100, target_radius=0.25)
    values.update(overrides)
    return WeaponProfile(**values)


class TestNormalize:
    """Tests for normalize and helpers."""

    def test_interpolates(self):
        assert normalize(5, 0, 10) == 0.5

    def test_clamps(self):
        assert normalize(-5, 0, 10) == 0.0
        assert normalize(50, 0, 10) == 1.0

    def test_equal_bounds(self):
        assert normalize(3, 4, 4) == 0.0

    def test_deg2rad(self):
        assert deg2rad(180) == pytest.approx(math.pi)


class TestRatingMappings:
    """Tests for precision, control and skill mappings."""

    def test_bloom_endpoints(self):
        assert map_precision_to_bloom(76) == pytest.approx(deg2rad(0.12))
        assert map_precision_to_bloom(20) == pytest.approx(deg2rad(0.15))

    def test_bloom_clamped_outside_domain(self):
        assert map_precision_to_bloom(200) == map_precision_to_bloom(76)
        assert map_precision_to_bloom(0) == map_precision_to_bloom(20)

    def test_better_precision_tighter_spread(self):
        assert map_precision_to_bloom(70) < map_precision_to_bloom(30)

    def test_drift_endpoints(self):
        assert map_control_to_drift(65) == pytest.approx(deg2rad(0.05))
        assert map_control_to_drift(8) == pytest.approx(deg2rad(0.16))

    def test_better_control_smaller_drift(self):
        assert map_control_to_drift(60) < map_control_to_drift(10)

    def test_control_norm(self):
        assert control_norm(8) == 0.0
        assert control_norm(65) == 1.0
        assert control_norm(36.5) == pytest.approx(0.5)

    def test_alpha_from_skill(self):
        assert alpha_from_skill(0.30) == 0.0
        assert alpha_from_skill(0.15) == pytest.approx(0.75)
        assert alpha_from_skill(0.5) == 0.0

    def test_alpha_never_reaches_one(self):
        assert alpha_from_skill(0.0) == 0.98
        assert alpha_from_skill(0.001) < 1.0

    def test_custom_constants(self):
        constants = MapperConstants(precision_min=0, precision_max=100,
                                    bloom_best_deg=0.0, bloom_worst_deg=1.0)
        assert map_precision_to_bloom(50, constants) == pytest.approx(deg2rad(0.5))


class TestMapperConstants:
    """Tests for constant validation."""

    def test_alpha_max_below_one(self):
        with pytest.raises(InvalidProfileError):
            MapperConstants(alpha_max=1.0)

    def test_inverted_domain(self):
        with pytest.raises(InvalidProfileError):
            MapperConstants(control_min=70, control_max=10)

    def test_negative_spread(self):
        with pytest.raises(InvalidProfileError):
            MapperConstants(sigma0_deg=-0.1)


class TestDeriveParameters:
    """Tests for derive_parameters."""

    def test_geometry(self):
        params = derive_parameters(make_profile(), 0.10)
        assert params.dt == pytest.approx(0.08)
        assert params.hits_to_kill == 5
        assert params.r_over_d == pytest.approx(0.005)

    def test_angles_in_radians(self):
        params = derive_parameters(make_profile(), 0.10)
        assert params.sigma0 == pytest.approx(deg2rad(0.06))
        assert params.sigma_player == pytest.approx(deg2rad(0.10))
        assert params.alpha == pytest.approx(1 - (0.1 / 0.3) ** 2)

    def test_sigma_total_is_quadrature_sum(self):
        params = derive_parameters(make_profile(), 0.10)
        expected = math.sqrt(params.sigma0 ** 2 + params.bloom ** 2 + params.sigma_player ** 2)
        assert params.sigma_total == pytest.approx(expected)

    def test_negative_skill_rejected(self):
        with pytest.raises(InvalidProfileError):
            derive_parameters(make_profile(), -0.1)

    def test_nan_skill_rejected(self):
        with pytest.raises(InvalidProfileError):
            derive_parameters(make_profile(), float("nan"))


class TestWeaponProfile:
    """Tests for profile validation."""

    def test_zero_damage_rejected(self):
        with pytest.raises(InvalidProfileError):
            make_profile(damage_per_hit=0)

    def test_negative_rpm_rejected(self):
        with pytest.raises(InvalidProfileError):
            make_profile(rpm=-600)

    def test_negative_distance_rejected(self):
        with pytest.raises(InvalidProfileError):
            make_profile(distance=-1)

    def test_infinite_damage_rejected(self):
        with pytest.raises(InvalidProfileError):
            make_profile(damage_per_hit=float("inf"))

    def test_zero_distance_floored(self):
        profile = make_profile(distance=0, target_radius=0.17)
        assert profile.angular_radius == pytest.approx(0.17 / 1e-9)

    def test_hits_to_kill_rounds_up(self):
        assert make_profile(damage_per_hit=33).hits_to_kill == 4
        assert make_profile(damage_per_hit=25).hits_to_kill == 4
        assert make_profile(damage_per_hit=150).hits_to_kill == 1

    def test_is_immutable(self):
        profile = make_profile()
        with pytest.raises(Exception):
            profile.rpm = 900


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
