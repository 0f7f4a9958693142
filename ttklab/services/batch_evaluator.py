"""Batch evaluation of a weapon profile over many simulated duels.

One evaluation runs N independent duels against a single RNG stream, seeded
once, so the whole trial sequence is reproducible from the seed. Trials must
run in order; parallelize across evaluations, each with its own RNG.

Metrics:
- TTK: theoretical time to kill at 100% accuracy, (H - 1) * dt
- ETTK: mean TTK over trials that killed
- Kill@W: fraction of all trials that killed within the window W
- AUC@W: area under the cumulative kill curve over [0, W], divided by W
- avgShots / avgHits / avgMisses / accuracy: over trials that killed
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .duel_simulator import DEFAULT_MAX_SHOTS, DuelOutcome, run_duel
from .hit_probability import DEFAULT_SAMPLE_COUNT
from .recoil_drift import DEFAULT_DRIFT_CONSTANTS, DriftConstants
from .rng import RNG
from .stat_mapper import DEFAULT_MAPPER_CONSTANTS, MapperConstants, derive_parameters
from .weapon_profile import InvalidProfileError, WeaponProfile

logger = logging.getLogger(__name__)

# Kill times sit on a shot grid; allow for float error against the window edge
_WINDOW_EPSILON = 1e-9


@dataclass(frozen=True)
class EvaluationConfig:
    """Options for one evaluation call, validated at construction.

    Attributes:
        trials: Number of independent duels
        kill_window: Window W in seconds for Kill@W and AUC@W
        max_shots: Shot budget per duel
        sample_count: Monte Carlo samples per hit-probability estimate
        seed: RNG seed used when no RNG is passed; None for an OS seed
        mapper: Stat mapping ranges
        drift: Recoil drift tuning
    """
    trials: int = 100
    kill_window: float = 1.0
    max_shots: int = DEFAULT_MAX_SHOTS
    sample_count: int = DEFAULT_SAMPLE_COUNT
    seed: Optional[int] = None
    mapper: MapperConstants = field(default=DEFAULT_MAPPER_CONSTANTS)
    drift: DriftConstants = field(default=DEFAULT_DRIFT_CONSTANTS)

    def __post_init__(self):
        if self.trials < 1:
            raise InvalidProfileError(f"trials must be >= 1, got {self.trials}")
        if not (self.kill_window > 0 and math.isfinite(self.kill_window)):
            raise InvalidProfileError(f"kill_window must be a positive number, got {self.kill_window}")
        if self.max_shots < 1:
            raise InvalidProfileError(f"max_shots must be >= 1, got {self.max_shots}")
        if self.sample_count < 1:
            raise InvalidProfileError(f"sample_count must be >= 1, got {self.sample_count}")


@dataclass(frozen=True)
class EvaluationResult:
    """Aggregate statistics for one (weapon, distance, skill) evaluation."""
    ttk: float
    ettk: float
    kill_probability: float
    auc: float
    avg_shots: float
    avg_hits: float
    avg_misses: float
    accuracy: float
    trials: int
    kills: int

    @property
    def any_kill(self) -> bool:
        return self.kills > 0

    def to_dict(self) -> Dict[str, float]:
        """Metrics under their display names."""
        return {
            "TTK": self.ttk,
            "ETTK": self.ettk,
            "Kill@W": self.kill_probability,
            "AUC@W": self.auc,
            "avgShots": self.avg_shots,
            "avgHits": self.avg_hits,
            "avgMisses": self.avg_misses,
            "accuracy": self.accuracy,
        }


def theoretical_ttk(profile: WeaponProfile) -> float:
    """Time to kill at 100% accuracy; the first shot is fired at t=0."""
    return (profile.hits_to_kill - 1) * profile.shot_interval


def kill_probability_curve(
    outcomes: Sequence[DuelOutcome],
    dt: float,
    kill_window: float,
    trials: int
) -> Tuple[np.ndarray, np.ndarray]:
    """Cumulative kill probability sampled on the shot grid.

    Kills only happen at shot times k * dt, so the curve is evaluated at
    t_i = min(i * dt, W) for i = 0..ceil(W / dt). Kills after W never count.
    The curve is flat after the last kill, so the grid stops one step past
    it and closes with a single point at W; its length is bounded by the
    shot budget rather than by W / dt.

    Returns:
        (times, probabilities) of equal length, starting at 0 and ending at W
    """
    steps = max(1, math.ceil(kill_window / dt))
    last_bucket = math.floor(kill_window / dt + _WINDOW_EPSILON)

    buckets = np.array([o.shots_fired - 1 for o in outcomes], dtype=np.int64)
    in_window = buckets[buckets <= last_bucket]
    grid_steps = min(steps, int(in_window.max()) + 1 if in_window.size else 1)
    counts = np.bincount(in_window, minlength=grid_steps + 1)[:grid_steps + 1]

    probabilities = np.cumsum(counts) / trials
    times = np.minimum(np.arange(grid_steps + 1) * dt, kill_window)
    if grid_steps < steps:
        times = np.append(times, kill_window)
        probabilities = np.append(probabilities, probabilities[-1])
    return times, probabilities


def _no_kill_result(ttk: float, trials: int) -> EvaluationResult:
    return EvaluationResult(
        ttk=ttk,
        ettk=math.inf,
        kill_probability=0.0,
        auc=0.0,
        avg_shots=0.0,
        avg_hits=0.0,
        avg_misses=0.0,
        accuracy=0.0,
        trials=trials,
        kills=0,
    )


def summarize(
    outcomes: Sequence[DuelOutcome],
    profile: WeaponProfile,
    config: EvaluationConfig
) -> EvaluationResult:
    """Aggregate successful duel outcomes into an EvaluationResult."""
    ttk = theoretical_ttk(profile)
    if not outcomes:
        return _no_kill_result(ttk, config.trials)

    shots = np.array([o.shots_fired for o in outcomes], dtype=float)
    hits = np.array([o.hits for o in outcomes], dtype=float)
    misses = np.array([o.misses for o in outcomes], dtype=float)

    times, probabilities = kill_probability_curve(
        outcomes, profile.shot_interval, config.kill_window, config.trials
    )
    # Trapezoid rule on the shot grid
    area = np.sum((probabilities[1:] + probabilities[:-1]) / 2.0 * np.diff(times))

    avg_shots = float(shots.mean())
    # Kill times lie on the shot grid, ttk = (shots - 1) * dt
    ettk = (avg_shots - 1.0) * profile.shot_interval
    avg_hits = float(hits.mean())

    return EvaluationResult(
        ttk=ttk,
        ettk=ettk,
        kill_probability=float(probabilities[-1]),
        auc=float(area / config.kill_window),
        avg_shots=avg_shots,
        avg_hits=avg_hits,
        avg_misses=float(misses.mean()),
        accuracy=avg_hits / avg_shots if avg_shots > 0 else 0.0,
        trials=config.trials,
        kills=len(outcomes),
    )


def run_trials(
    profile: WeaponProfile,
    player_skill_deg: float,
    config: EvaluationConfig,
    rng: RNG
) -> List[DuelOutcome]:
    """Run config.trials duels in order on one RNG stream; kills only."""
    params = derive_parameters(profile, player_skill_deg, config.mapper)
    outcomes = []
    for _ in range(config.trials):
        outcome = run_duel(params, rng, config.max_shots, config.sample_count, config.drift)
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes


def evaluate(
    profile: WeaponProfile,
    player_skill_deg: float,
    config: Optional[EvaluationConfig] = None,
    rng: Optional[RNG] = None,
    **overrides
) -> EvaluationResult:
    """Evaluate a weapon profile for one player skill.

    Args:
        profile: Weapon at the engagement distance
        player_skill_deg: Player aim jitter in degrees (lower is better)
        config: Evaluation options; defaults to EvaluationConfig()
        rng: Random source shared by all trials; defaults to RNG(config.seed)
        **overrides: EvaluationConfig fields to replace, e.g. trials=500

    Returns:
        EvaluationResult. If no trial killed, ETTK is +inf and every other
        statistic except TTK is 0.
    """
    config = config or EvaluationConfig()
    if overrides:
        config = replace(config, **overrides)
    if rng is None:
        rng = RNG(config.seed)

    outcomes = run_trials(profile, player_skill_deg, config, rng)
    result = summarize(outcomes, profile, config)

    if not result.any_kill:
        logger.warning(
            "No kills in %d trials for %s at distance %s",
            config.trials, profile.name or "profile", profile.distance,
        )
    else:
        logger.debug(
            "Evaluated %s @ %s: ETTK=%.3fs Kill@W=%.2f (%d/%d kills)",
            profile.name or "profile", profile.distance,
            result.ettk, result.kill_probability, result.kills, config.trials,
        )
    return result
