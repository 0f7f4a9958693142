from pydantic import BaseModel, Field
from typing import Optional, List, Dict


class ProfileInput(BaseModel):
    """Weapon at one engagement distance."""
    damage_per_hit: float = Field(..., gt=0)
    rpm: float = Field(..., gt=0)
    distance: float = Field(..., ge=0)
    precision: float
    control: float
    hp: float = Field(100.0, gt=0)
    target_radius: float = Field(0.17, ge=0)
    name: Optional[str] = None


class EvaluationOptions(BaseModel):
    trials: Optional[int] = Field(None, ge=1, le=5000)
    kill_window: Optional[float] = Field(None, gt=0, le=60)  # seconds
    max_shots: Optional[int] = Field(None, ge=1, le=500)
    sample_count: Optional[int] = Field(None, ge=1, le=10000)
    seed: Optional[int] = Field(None, ge=0)


class EvaluateRequest(BaseModel):
    profile: ProfileInput
    skill: float = Field(0.10, ge=0.0, le=0.30)  # player jitter, degrees
    options: EvaluationOptions = Field(default_factory=EvaluationOptions)


class DuelRequest(BaseModel):
    profile: ProfileInput
    skill: float = Field(0.10, ge=0.0, le=0.30)
    seed: int = Field(..., ge=0)
    max_shots: Optional[int] = Field(None, ge=1, le=500)
    sample_count: Optional[int] = Field(None, ge=1, le=10000)


class EvaluationResponse(BaseModel):
    # ETTK is null when no trial produced a kill
    TTK: float
    ETTK: Optional[float] = None
    kill_probability: float
    auc: float
    avg_shots: float
    avg_hits: float
    avg_misses: float
    accuracy: float
    trials: int
    kills: int


class DuelResponse(BaseModel):
    state: str  # 'killed' or 'exhausted'
    killed: bool
    ttk: Optional[float] = None
    shots_fired: Optional[int] = None
    hits: Optional[int] = None
    misses: Optional[int] = None


class DistanceResult(BaseModel):
    distance: float
    damage_per_hit: float
    result: EvaluationResponse


class WeaponEvaluationResponse(BaseModel):
    weapon: str
    category: str
    skill: float
    distances: List[DistanceResult]


class CompareRequest(BaseModel):
    weapons: List[str] = Field(..., min_length=1)
    skill: float = Field(0.10, ge=0.0, le=0.30)
    metric: str = Field("TTK", pattern="^(TTK|ETTK)$")


class ComparisonCellResponse(BaseModel):
    value: Optional[float] = None
    accuracy: float
    is_best: bool


class ComparisonResponse(BaseModel):
    metric: str
    skill: float
    distances: List[float]
    rows: Dict[str, Dict[str, ComparisonCellResponse]]
    best: Dict[str, float]
