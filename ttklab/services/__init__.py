# Core engine (pure computation, no I/O)
from .rng import RNG, hash_seed, seed_key, rng_for
from .weapon_profile import WeaponProfile, InvalidProfileError
from .stat_mapper import MapperConstants, ModelParameters, derive_parameters
from .hit_probability import estimate_hit_probability, sigma_total_for_shot
from .recoil_drift import AimState, DriftConstants, advance_aim
from .duel_simulator import DuelOutcome, DuelState, simulate_one_duel
from .batch_evaluator import EvaluationConfig, EvaluationResult, evaluate, theoretical_ttk
# Catalog and orchestration
from .weapon_catalog import WeaponCatalog, WeaponStats, WeaponCategory, CatalogError
from .ttk_analysis import WeaponResults, ResultsCache, evaluate_weapon, comparison_table

__all__ = [
    "RNG",
    "hash_seed",
    "seed_key",
    "rng_for",
    "WeaponProfile",
    "InvalidProfileError",
    "MapperConstants",
    "ModelParameters",
    "derive_parameters",
    "estimate_hit_probability",
    "sigma_total_for_shot",
    "AimState",
    "DriftConstants",
    "advance_aim",
    "DuelOutcome",
    "DuelState",
    "simulate_one_duel",
    "EvaluationConfig",
    "EvaluationResult",
    "evaluate",
    "theoretical_ttk",
    "WeaponCatalog",
    "WeaponStats",
    "WeaponCategory",
    "CatalogError",
    "WeaponResults",
    "ResultsCache",
    "evaluate_weapon",
    "comparison_table",
]
