"""Recoil drift of the aim mean during sustained fire.

After each shot the aim mean receives a recoil impulse. The player cancels
a fraction alpha of every impulse, and the remaining offset decays toward
center between shots. A skill and control dependent cap, drawn fresh each
shot, bounds how far the mean can wander: without it long bursts would
always miss regardless of skill.
"""

import math
from dataclasses import dataclass, field

from .hit_probability import Vec2
from .rng import RNG
from .stat_mapper import ModelParameters, clamp, deg2rad
from .weapon_profile import InvalidProfileError


@dataclass(frozen=True)
class DriftConstants:
    """Tuning for the drift feedback loop and its stochastic cap."""
    # Centering pressure between shots (1/s)
    recovery_rate: float = 4.0
    # Sideways wobble as a fraction of the vertical step, either direction
    wobble_fraction: float = 0.10

    # Absolute cap (degrees), worst to best blend
    cap_abs_worst_deg: float = 0.25
    cap_abs_best_deg: float = 0.03
    # Cap as a multiple of the target angular radius
    cap_rel_worst: float = 1.6
    cap_rel_best: float = 0.9
    # Blend of compensation and control driving both caps
    cap_alpha_weight: float = 0.5
    cap_control_weight: float = 0.5

    # Lognormal cap noise: relative sigma = base - slope * control_norm
    cap_noise_base: float = 0.20
    cap_noise_slope: float = 0.15
    cap_mult_min: float = 0.7
    cap_mult_max: float = 1.5

    def __post_init__(self):
        if self.recovery_rate < 0:
            raise InvalidProfileError("recovery_rate must be >= 0")
        if self.wobble_fraction < 0:
            raise InvalidProfileError("wobble_fraction must be >= 0")
        if self.cap_mult_min <= 0 or self.cap_mult_min > self.cap_mult_max:
            raise InvalidProfileError("cap multiplier bounds must satisfy 0 < min <= max")
        if self.cap_abs_best_deg < 0 or self.cap_rel_best < 0:
            raise InvalidProfileError("drift caps must be >= 0")


DEFAULT_DRIFT_CONSTANTS = DriftConstants()


@dataclass
class AimState:
    """Mean angular aim offset of one in-flight duel (radians)."""
    mean_offset: Vec2 = field(default=(0.0, 0.0))

    def reset(self) -> None:
        self.mean_offset = (0.0, 0.0)

    @property
    def magnitude(self) -> float:
        return math.hypot(*self.mean_offset)


def recoil_step_vector(
    drift_step: float,
    rng: RNG,
    constants: DriftConstants = DEFAULT_DRIFT_CONSTANTS
) -> Vec2:
    """Recoil impulse for one shot: vertical climb plus a small yaw wobble."""
    wobble = (rng.random() - 0.5) * 2.0 * constants.wobble_fraction
    return (drift_step * wobble, drift_step)


def update_mean_offset(
    offset: Vec2,
    impulse: Vec2,
    alpha: float,
    dt: float,
    constants: DriftConstants = DEFAULT_DRIFT_CONSTANTS
) -> Vec2:
    """Decay the previous offset and add the uncompensated part of the impulse."""
    keep = math.exp(-constants.recovery_rate * dt)
    return (
        offset[0] * keep + (1.0 - alpha) * impulse[0],
        offset[1] * keep + (1.0 - alpha) * impulse[1],
    )


def drift_cap(
    alpha: float,
    control_norm: float,
    r_over_d: float,
    constants: DriftConstants = DEFAULT_DRIFT_CONSTANTS
) -> float:
    """Mean drift cap (radians): the larger of an absolute and a target-relative cap.

    The absolute cap guarantees some limit even for tiny or far targets.
    """
    mix = constants.cap_alpha_weight * alpha + constants.cap_control_weight * control_norm

    abs_deg = constants.cap_abs_worst_deg - mix * (constants.cap_abs_worst_deg - constants.cap_abs_best_deg)
    k_rel = constants.cap_rel_worst - mix * (constants.cap_rel_worst - constants.cap_rel_best)

    return max(deg2rad(abs_deg), k_rel * r_over_d)


def draw_stochastic_cap(
    mean_cap: float,
    control_norm: float,
    rng: RNG,
    constants: DriftConstants = DEFAULT_DRIFT_CONSTANTS
) -> float:
    """Perturb the mean cap by clamped lognormal noise; better control, less noise."""
    rel_sigma = constants.cap_noise_base - constants.cap_noise_slope * control_norm
    mult = math.exp(rel_sigma * rng.gauss())
    return mean_cap * clamp(mult, constants.cap_mult_min, constants.cap_mult_max)


def clamp_to_radius(offset: Vec2, cap: float) -> Vec2:
    """Rescale offset radially to at most cap, keeping its direction."""
    m = math.hypot(offset[0], offset[1])
    if m <= cap:
        return offset
    s = cap / m
    return (offset[0] * s, offset[1] * s)


def advance_aim(
    aim: AimState,
    params: ModelParameters,
    rng: RNG,
    constants: DriftConstants = DEFAULT_DRIFT_CONSTANTS
) -> Vec2:
    """Apply one shot's recoil to the aim state in place.

    Draw order is fixed (wobble uniform, then cap gaussian) so a seed
    reproduces the same trajectory.

    Returns:
        The new mean offset
    """
    impulse = recoil_step_vector(params.drift_step, rng, constants)
    offset = update_mean_offset(aim.mean_offset, impulse, params.alpha, params.dt, constants)

    mean_cap = drift_cap(params.alpha, params.control_norm, params.r_over_d, constants)
    cap = draw_stochastic_cap(mean_cap, params.control_norm, rng, constants)

    aim.mean_offset = clamp_to_radius(offset, cap)
    return aim.mean_offset
