"""Game-stat to model-parameter mappings.

Converts raw weapon ratings (precision, control) and the player skill slider
into the physical quantities used by the duel simulator. All functions are
pure; tuning ranges live in MapperConstants so they can be overridden per
call without touching shared state.

Angles are given in degrees at this boundary and returned in radians.
"""

import math
from dataclasses import dataclass

from .hit_probability import sigma_total_for_shot
from .weapon_profile import InvalidProfileError, WeaponProfile


@dataclass(frozen=True)
class MapperConstants:
    """Tuning ranges for the stat mappings.

    "best" values apply at the top of a rating's domain, "worst" at the
    bottom; ratings in between interpolate linearly.
    """
    # Base weapon spread, the minimal inherent inaccuracy (degrees)
    sigma0_deg: float = 0.06

    precision_min: float = 20.0
    precision_max: float = 76.0
    bloom_best_deg: float = 0.12
    bloom_worst_deg: float = 0.15

    control_min: float = 8.0
    control_max: float = 65.0
    drift_best_deg: float = 0.05
    drift_worst_deg: float = 0.16

    # Player jitter at which compensation reaches zero (degrees)
    skill_reference_deg: float = 0.30
    # Perfect compensation is never allowed
    alpha_max: float = 0.98

    def __post_init__(self):
        if self.precision_min > self.precision_max:
            raise InvalidProfileError("precision_min must not exceed precision_max")
        if self.control_min > self.control_max:
            raise InvalidProfileError("control_min must not exceed control_max")
        if not 0.0 <= self.alpha_max < 1.0:
            raise InvalidProfileError(f"alpha_max must be in [0, 1), got {self.alpha_max}")
        if self.skill_reference_deg <= 0:
            raise InvalidProfileError("skill_reference_deg must be > 0")
        for name in ("sigma0_deg", "bloom_best_deg", "bloom_worst_deg",
                     "drift_best_deg", "drift_worst_deg"):
            if getattr(self, name) < 0:
                raise InvalidProfileError(f"{name} must be >= 0")


DEFAULT_MAPPER_CONSTANTS = MapperConstants()


@dataclass(frozen=True)
class ModelParameters:
    """Physical model quantities for one (profile, skill) pair.

    Angles are radians; dt is seconds.
    """
    sigma0: float
    bloom: float
    drift_step: float
    sigma_player: float
    alpha: float
    control_norm: float
    dt: float
    hits_to_kill: int
    r_over_d: float

    @property
    def sigma_total(self) -> float:
        return sigma_total_for_shot(self.sigma0, self.bloom, self.sigma_player)


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def normalize(value: float, vmin: float, vmax: float) -> float:
    """Map value onto [0, 1] over [vmin, vmax], clamped. 0 if vmin == vmax."""
    if vmax == vmin:
        return 0.0
    return clamp((value - vmin) / (vmax - vmin), 0.0, 1.0)


def deg2rad(deg: float) -> float:
    return deg * math.pi / 180.0


def _interpolate_deg(norm: float, best_deg: float, worst_deg: float) -> float:
    return best_deg + (1.0 - norm) * (worst_deg - best_deg)


def map_precision_to_bloom(
    precision_raw: float,
    constants: MapperConstants = DEFAULT_MAPPER_CONSTANTS
) -> float:
    """Precision rating to per-shot spread (radians). Higher precision, tighter spread."""
    p_norm = normalize(precision_raw, constants.precision_min, constants.precision_max)
    return deg2rad(_interpolate_deg(p_norm, constants.bloom_best_deg, constants.bloom_worst_deg))


def map_control_to_drift(
    control_raw: float,
    constants: MapperConstants = DEFAULT_MAPPER_CONSTANTS
) -> float:
    """Control rating to deterministic recoil drift step (radians/shot)."""
    c_norm = control_norm(control_raw, constants)
    return deg2rad(_interpolate_deg(c_norm, constants.drift_best_deg, constants.drift_worst_deg))


def control_norm(
    control_raw: float,
    constants: MapperConstants = DEFAULT_MAPPER_CONSTANTS
) -> float:
    return normalize(control_raw, constants.control_min, constants.control_max)


def alpha_from_skill(
    sigma_player_deg: float,
    constants: MapperConstants = DEFAULT_MAPPER_CONSTANTS
) -> float:
    """Player jitter to recoil compensation fraction.

    Smaller jitter means more of each recoil impulse is cancelled, capped at
    alpha_max.
    """
    alpha = 1.0 - (sigma_player_deg / constants.skill_reference_deg) ** 2
    return clamp(alpha, 0.0, constants.alpha_max)


def derive_parameters(
    profile: WeaponProfile,
    player_skill_deg: float,
    constants: MapperConstants = DEFAULT_MAPPER_CONSTANTS
) -> ModelParameters:
    """Derive all model parameters for one engagement.

    Args:
        profile: Weapon profile at the engagement distance
        player_skill_deg: Player aim jitter in degrees (lower is better)
        constants: Mapping ranges

    Returns:
        ModelParameters with every angle in radians
    """
    if player_skill_deg is None or not math.isfinite(player_skill_deg) or player_skill_deg < 0:
        raise InvalidProfileError(f"player skill must be a finite jitter >= 0, got {player_skill_deg!r}")

    return ModelParameters(
        sigma0=deg2rad(constants.sigma0_deg),
        bloom=map_precision_to_bloom(profile.precision, constants),
        drift_step=map_control_to_drift(profile.control, constants),
        sigma_player=deg2rad(player_skill_deg),
        alpha=alpha_from_skill(player_skill_deg, constants),
        control_norm=control_norm(profile.control, constants),
        dt=profile.shot_interval,
        hits_to_kill=profile.hits_to_kill,
        r_over_d=profile.angular_radius,
    )
