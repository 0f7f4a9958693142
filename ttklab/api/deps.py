"""Shared route dependencies."""

from fastapi import Request

from ..config import get_settings
from ..services.batch_evaluator import EvaluationConfig
from ..services.ttk_analysis import ResultsCache
from ..services.weapon_catalog import WeaponCatalog


def default_config() -> EvaluationConfig:
    """Evaluation defaults from settings."""
    settings = get_settings()
    return EvaluationConfig(
        trials=settings.default_trials,
        kill_window=settings.default_kill_window,
        max_shots=settings.default_max_shots,
        sample_count=settings.default_sample_count,
    )


def get_catalog(request: Request) -> WeaponCatalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        catalog = WeaponCatalog.load(get_settings().catalog_path)
        request.app.state.catalog = catalog
    return catalog


def get_results_cache(request: Request) -> ResultsCache:
    cache = getattr(request.app.state, "results_cache", None)
    if cache is None:
        settings = get_settings()
        cache = ResultsCache(
            default_config(),
            hp=settings.hp,
            target_radius=settings.target_radius,
            max_entries=settings.results_cache_size,
        )
        request.app.state.results_cache = cache
    return cache


def distance_label(distance: float) -> str:
    """JSON key for a distance: '50' rather than '50.0'."""
    return str(int(distance)) if float(distance).is_integer() else str(distance)
