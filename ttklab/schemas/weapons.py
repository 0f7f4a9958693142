from pydantic import BaseModel
from typing import Optional, List, Dict


class WeaponResponse(BaseModel):
    name: str
    category: str
    control: float
    precision: float
    rpm: float
    damage: Dict[str, float]  # distance (meters) -> damage per hit


class DamageTableResponse(BaseModel):
    distances: List[float]
    rows: Dict[str, Dict[str, Optional[float]]]
    best: Dict[str, float]
