"""Single-duel simulation.

Fires shots at a fixed cadence until the target's health is depleted or the
shot budget runs out. Each shot's hit chance comes from the current aim
mean and total spread; recoil then moves the aim mean for the next shot.

Duel flow:
1. FIRING - estimate hit probability, roll one uniform, count the hit
2. KILLED - hits reached hits-to-kill; stop immediately
3. EXHAUSTED - max_shots fired without a kill; no outcome
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .hit_probability import DEFAULT_SAMPLE_COUNT, estimate_hit_probability
from .recoil_drift import DEFAULT_DRIFT_CONSTANTS, AimState, DriftConstants, advance_aim
from .rng import RNG
from .stat_mapper import DEFAULT_MAPPER_CONSTANTS, MapperConstants, ModelParameters, derive_parameters
from .weapon_profile import InvalidProfileError, WeaponProfile

logger = logging.getLogger(__name__)

DEFAULT_MAX_SHOTS = 50


class DuelState(Enum):
    FIRING = "firing"
    KILLED = "killed"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class DuelOutcome:
    """Result of one engagement that ended in a kill."""
    ttk: float  # seconds; first shot at t=0
    shots_fired: int
    hits: int
    misses: int


def run_duel(
    params: ModelParameters,
    rng: RNG,
    max_shots: int = DEFAULT_MAX_SHOTS,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
    drift_constants: DriftConstants = DEFAULT_DRIFT_CONSTANTS
) -> Optional[DuelOutcome]:
    """Simulate one duel from already-derived model parameters.

    Used by the batch evaluator so parameters are derived once per
    evaluation rather than once per trial.
    """
    if max_shots < 1:
        raise InvalidProfileError(f"max_shots must be >= 1, got {max_shots}")

    sigma = params.sigma_total
    aim = AimState()
    hits = 0

    for n in range(1, max_shots + 1):
        p_hit = estimate_hit_probability(aim.mean_offset, sigma, params.r_over_d, sample_count, rng)

        if rng.random() < p_hit:
            hits += 1
            if hits >= params.hits_to_kill:
                return DuelOutcome(
                    ttk=(n - 1) * params.dt,
                    shots_fired=n,
                    hits=hits,
                    misses=n - hits,
                )

        advance_aim(aim, params, rng, drift_constants)

    logger.debug("Duel %s after %d shots with %d hits", DuelState.EXHAUSTED.value, max_shots, hits)
    return None


def simulate_one_duel(
    profile: WeaponProfile,
    player_skill_deg: float,
    rng: RNG,
    max_shots: int = DEFAULT_MAX_SHOTS,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
    mapper_constants: MapperConstants = DEFAULT_MAPPER_CONSTANTS,
    drift_constants: DriftConstants = DEFAULT_DRIFT_CONSTANTS
) -> Optional[DuelOutcome]:
    """Simulate one engagement shot by shot.

    Args:
        profile: Weapon at the engagement distance
        player_skill_deg: Player aim jitter in degrees (lower is better)
        rng: Random source; advanced in place
        max_shots: Shot budget before the duel counts as no kill
        sample_count: Monte Carlo samples per hit-probability estimate
        mapper_constants: Stat mapping ranges
        drift_constants: Recoil drift tuning

    Returns:
        DuelOutcome on a kill, None if the budget was exhausted
    """
    params = derive_parameters(profile, player_skill_deg, mapper_constants)
    return run_duel(params, rng, max_shots, sample_count, drift_constants)
