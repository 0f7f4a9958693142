from .ttk import (
    ProfileInput, EvaluationOptions, EvaluateRequest, DuelRequest,
    EvaluationResponse, DuelResponse, DistanceResult, WeaponEvaluationResponse,
    CompareRequest, ComparisonCellResponse, ComparisonResponse
)
from .weapons import WeaponResponse, DamageTableResponse

__all__ = [
    "ProfileInput", "EvaluationOptions", "EvaluateRequest", "DuelRequest",
    "EvaluationResponse", "DuelResponse", "DistanceResult", "WeaponEvaluationResponse",
    "CompareRequest", "ComparisonCellResponse", "ComparisonResponse",
    "WeaponResponse", "DamageTableResponse",
]
