"""Weapon-level TTK analysis built on the batch evaluator.

Evaluates a catalog weapon at every distance it lists, with one RNG per
(weapon, distance, skill) seeded from a hash of that key, so each cell is
reproducible and cacheable on its own. Also builds TTK/ETTK comparison
tables across weapons.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .batch_evaluator import EvaluationConfig, EvaluationResult, evaluate
from .rng import rng_for
from .weapon_catalog import WeaponStats

logger = logging.getLogger(__name__)

METRICS = ("TTK", "ETTK")
DEFAULT_CACHE_SIZE = 256


@dataclass
class WeaponResults:
    """Evaluation results for one weapon at each listed distance."""
    weapon: WeaponStats
    skill_deg: float
    results_by_distance: Dict[float, EvaluationResult] = field(default_factory=dict)


def evaluate_weapon(
    weapon: WeaponStats,
    player_skill_deg: float,
    config: Optional[EvaluationConfig] = None,
    hp: float = 100.0,
    target_radius: float = 0.17
) -> WeaponResults:
    """Evaluate a weapon at every distance in its damage table."""
    config = config or EvaluationConfig()
    results = WeaponResults(weapon=weapon, skill_deg=player_skill_deg)

    for distance in weapon.distances:
        profile = weapon.profile_at(distance, hp=hp, target_radius=target_radius)
        rng = rng_for(weapon.name, distance, player_skill_deg)
        results.results_by_distance[distance] = evaluate(profile, player_skill_deg, config, rng=rng)

    logger.info(
        "Evaluated %s at %d distances (skill %.2f deg)",
        weapon.name, len(results.results_by_distance), player_skill_deg,
    )
    return results


@dataclass
class ComparisonCell:
    value: float
    accuracy: float
    is_best: bool = False


@dataclass
class ComparisonTable:
    """One metric per weapon per distance; lowest value per column is best."""
    metric: str
    distances: List[float]
    rows: Dict[str, Dict[float, ComparisonCell]]
    best: Dict[float, float]


def comparison_table(results: Iterable[WeaponResults], metric: str = "TTK") -> ComparisonTable:
    """Compare weapons on TTK or ETTK across the union of their distances.

    Ties for the lowest value are all marked best. Columns where every
    weapon failed to kill (ETTK infinite) have no best value.
    """
    if metric not in METRICS:
        raise ValueError(f"metric must be one of {METRICS}, got {metric!r}")

    results = list(results)
    distances = sorted({d for r in results for d in r.results_by_distance})

    rows: Dict[str, Dict[float, ComparisonCell]] = {}
    for weapon_results in results:
        row = {}
        for distance, result in weapon_results.results_by_distance.items():
            value = result.ttk if metric == "TTK" else result.ettk
            row[distance] = ComparisonCell(value=value, accuracy=result.accuracy)
        rows[weapon_results.weapon.name] = row

    best: Dict[float, float] = {}
    for distance in distances:
        values = [row[distance].value for row in rows.values() if distance in row]
        finite = [v for v in values if v != float("inf")]
        if finite:
            best[distance] = min(finite)

    for row in rows.values():
        for distance, cell in row.items():
            cell.is_best = distance in best and cell.value == best[distance]

    return ComparisonTable(metric=metric, distances=distances, rows=rows, best=best)


def round_skill(skill_deg: float) -> float:
    """Skill on the two-decimal grid shared by cache keys and seeds."""
    return float(f"{skill_deg:.2f}")


class ResultsCache:
    """Per-weapon results keyed by (weapon name, skill rounded to 2 dp).

    Skill is rounded before evaluating, so every skill that maps to a key
    gets the same numbers. Entries are evicted least-recently-used once
    max_entries is reached. Safe to share between request threads.
    """

    def __init__(self, config: Optional[EvaluationConfig] = None, hp: float = 100.0,
                 target_radius: float = 0.17, max_entries: int = DEFAULT_CACHE_SIZE):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.config = config or EvaluationConfig()
        self.hp = hp
        self.target_radius = target_radius
        self.max_entries = max_entries
        self._entries: "OrderedDict[Tuple[str, str], WeaponResults]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def key(weapon_name: str, skill_deg: float) -> Tuple[str, str]:
        return (weapon_name, f"{round_skill(skill_deg):.2f}")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._entries

    def get(self, weapon: WeaponStats, skill_deg: float) -> WeaponResults:
        skill = round_skill(skill_deg)
        key = self.key(weapon.name, skill)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                return cached

        # Evaluate outside the lock; concurrent misses on one key produce identical results
        results = evaluate_weapon(weapon, skill, self.config, self.hp, self.target_radius)

        with self._lock:
            self._entries[key] = results
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cached results for %s @ %s deg", *evicted)
        return results

    def get_many(self, weapons: Iterable[WeaponStats], skill_deg: float) -> List[WeaponResults]:
        return [self.get(weapon, skill_deg) for weapon in weapons]

    def retain(self, weapon_names: Iterable[str], skill_deg: float) -> None:
        """Drop every entry except the given weapons at this skill."""
        keep = {self.key(name, skill_deg) for name in weapon_names}
        with self._lock:
            for key in [k for k in self._entries if k not in keep]:
                del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
