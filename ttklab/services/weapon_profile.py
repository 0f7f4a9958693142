"""Engine input record for a single (weapon, distance) engagement."""

import math
from dataclasses import dataclass
from typing import Optional

# Distances below this are floored rather than rejected
MIN_DISTANCE = 1e-9


class InvalidProfileError(ValueError):
    """Raised when engine inputs would produce a meaningless result."""


def _require_finite(name: str, value: float) -> None:
    if value is None or not math.isfinite(value):
        raise InvalidProfileError(f"{name} must be a finite number, got {value!r}")


@dataclass(frozen=True)
class WeaponProfile:
    """Damage and handling of one weapon at one engagement distance.

    Attributes:
        damage_per_hit: Damage dealt by one hit at this distance
        rpm: Rate of fire (rounds per minute)
        distance: Engagement distance, same units as target_radius
        precision: Raw precision rating (higher is better)
        control: Raw control rating (higher is better)
        hp: Target health pool
        target_radius: Effective hit radius of the target
        name: Optional weapon name, informational only
    """
    damage_per_hit: float
    rpm: float
    distance: float
    precision: float
    control: float
    hp: float = 100.0
    target_radius: float = 0.17
    name: Optional[str] = None

    def __post_init__(self):
        for field_name in ("damage_per_hit", "rpm", "distance", "precision",
                           "control", "hp", "target_radius"):
            _require_finite(field_name, getattr(self, field_name))

        if self.damage_per_hit <= 0:
            raise InvalidProfileError(f"damage_per_hit must be > 0, got {self.damage_per_hit}")
        if self.rpm <= 0:
            raise InvalidProfileError(f"rpm must be > 0, got {self.rpm}")
        if self.hp <= 0:
            raise InvalidProfileError(f"hp must be > 0, got {self.hp}")
        if self.distance < 0:
            raise InvalidProfileError(f"distance must be >= 0, got {self.distance}")
        if self.target_radius < 0:
            raise InvalidProfileError(f"target_radius must be >= 0, got {self.target_radius}")

    @property
    def shot_interval(self) -> float:
        """Seconds between consecutive shots."""
        return 60.0 / self.rpm

    @property
    def hits_to_kill(self) -> int:
        return math.ceil(self.hp / self.damage_per_hit)

    @property
    def angular_radius(self) -> float:
        """Target radius over distance (small-angle radians)."""
        return self.target_radius / max(MIN_DISTANCE, self.distance)
