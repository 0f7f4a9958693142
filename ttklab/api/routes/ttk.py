"""TTK evaluation API routes.

Evaluation is CPU-bound, so these handlers are plain functions and run in
FastAPI's threadpool instead of blocking the event loop.
"""

import math
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import default_config, distance_label, get_catalog, get_results_cache
from ...schemas.ttk import (
    ProfileInput, EvaluateRequest, DuelRequest, EvaluationResponse, DuelResponse,
    DistanceResult, WeaponEvaluationResponse, CompareRequest,
    ComparisonCellResponse, ComparisonResponse
)
from ...services.batch_evaluator import EvaluationResult, evaluate
from ...services.duel_simulator import DEFAULT_MAX_SHOTS, DuelState, simulate_one_duel
from ...services.hit_probability import DEFAULT_SAMPLE_COUNT
from ...services.rng import RNG
from ...services.ttk_analysis import ResultsCache, comparison_table, round_skill
from ...services.weapon_catalog import WeaponCatalog
from ...services.weapon_profile import InvalidProfileError, WeaponProfile

router = APIRouter()


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _to_profile(data: ProfileInput) -> WeaponProfile:
    try:
        return WeaponProfile(**data.model_dump())
    except InvalidProfileError as e:
        raise HTTPException(status_code=422, detail=str(e))


def evaluation_response(result: EvaluationResult) -> EvaluationResponse:
    return EvaluationResponse(
        TTK=result.ttk,
        ETTK=_finite_or_none(result.ettk),
        kill_probability=result.kill_probability,
        auc=result.auc,
        avg_shots=result.avg_shots,
        avg_hits=result.avg_hits,
        avg_misses=result.avg_misses,
        accuracy=result.accuracy,
        trials=result.trials,
        kills=result.kills,
    )


@router.post("/evaluate", response_model=EvaluationResponse)
def evaluate_profile(request: EvaluateRequest):
    """Run a batch evaluation for a raw weapon profile."""
    profile = _to_profile(request.profile)
    overrides = request.options.model_dump(exclude_none=True)

    try:
        result = evaluate(profile, request.skill, default_config(), **overrides)
    except InvalidProfileError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return evaluation_response(result)


@router.post("/duel", response_model=DuelResponse)
def simulate_duel(request: DuelRequest):
    """Simulate a single seeded duel and return the raw outcome."""
    profile = _to_profile(request.profile)

    try:
        outcome = simulate_one_duel(
            profile,
            request.skill,
            RNG(request.seed),
            max_shots=request.max_shots or DEFAULT_MAX_SHOTS,
            sample_count=request.sample_count or DEFAULT_SAMPLE_COUNT,
        )
    except InvalidProfileError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if outcome is None:
        return DuelResponse(state=DuelState.EXHAUSTED.value, killed=False)
    return DuelResponse(
        state=DuelState.KILLED.value,
        killed=True,
        ttk=outcome.ttk,
        shots_fired=outcome.shots_fired,
        hits=outcome.hits,
        misses=outcome.misses,
    )


@router.get("/weapons/{weapon_name}", response_model=WeaponEvaluationResponse)
def evaluate_catalog_weapon(
    weapon_name: str,
    skill: float = Query(0.10, ge=0.0, le=0.30),
    catalog: WeaponCatalog = Depends(get_catalog),
    cache: ResultsCache = Depends(get_results_cache),
):
    """Evaluate a catalog weapon at every distance it lists.

    Each distance is seeded from (weapon, distance, skill), so repeated
    requests return identical numbers.
    """
    weapon = catalog.get_weapon(weapon_name)
    if weapon is None:
        raise HTTPException(status_code=404, detail=f"Weapon {weapon_name} not found")

    results = cache.get(weapon, skill)
    return WeaponEvaluationResponse(
        weapon=weapon.name,
        category=weapon.category.value,
        skill=results.skill_deg,
        distances=[
            DistanceResult(
                distance=distance,
                damage_per_hit=weapon.damage_at(distance),
                result=evaluation_response(result),
            )
            for distance, result in sorted(results.results_by_distance.items())
        ],
    )


@router.post("/compare", response_model=ComparisonResponse)
def compare_weapons(
    request: CompareRequest,
    catalog: WeaponCatalog = Depends(get_catalog),
    cache: ResultsCache = Depends(get_results_cache),
):
    """Compare weapons on TTK or ETTK at every listed distance."""
    try:
        weapons = catalog.select(request.weapons)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))

    results = cache.get_many(weapons, request.skill)
    table = comparison_table(results, request.metric)

    return ComparisonResponse(
        metric=table.metric,
        skill=round_skill(request.skill),
        distances=table.distances,
        rows={
            name: {
                distance_label(d): ComparisonCellResponse(
                    value=_finite_or_none(cell.value),
                    accuracy=cell.accuracy,
                    is_best=cell.is_best,
                )
                for d, cell in sorted(row.items())
            }
            for name, row in table.rows.items()
        },
        best={distance_label(d): v for d, v in table.best.items()},
    )
