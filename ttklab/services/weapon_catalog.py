"""Weapon catalog for TTK evaluations.

Holds per-weapon handling ratings and damage-by-distance tables, loaded from
a JSON catalog of the form::

    {
        "Weapon Name": {
            "category": "rifle",
            "control": 45,
            "precision": 60,
            "rpm": 750,
            "damage": {"10": 25, "50": 20}
        }
    }

and resolves one (weapon, distance) pair into a WeaponProfile for the engine.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .weapon_profile import WeaponProfile

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent / "data" / "weapons.json"


class CatalogError(ValueError):
    """Raised for malformed catalog records."""


class WeaponCategory(Enum):
    RIFLE = "rifle"
    SMG = "smg"
    LMG = "lmg"
    SNIPER = "sniper"
    MARKSMAN = "marksman"
    SHOTGUN = "shotgun"
    PISTOL = "pistol"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "WeaponCategory":
        """Case-insensitive lookup; unknown categories map to OTHER."""
        normalized = (value or "").strip().lower()
        for category in cls:
            if category.value == normalized:
                return category
        return cls.OTHER


@dataclass
class WeaponStats:
    """Catalog record for a single weapon."""
    name: str
    category: WeaponCategory
    control: float
    precision: float
    rpm: float
    # distance (meters) -> damage per hit, sorted by distance
    damage: Dict[float, float] = field(default_factory=dict)

    @property
    def distances(self) -> List[float]:
        return sorted(self.damage)

    def damage_at(self, distance: float) -> float:
        """Damage per hit at a listed distance."""
        try:
            return self.damage[float(distance)]
        except KeyError:
            raise KeyError(f"{self.name} has no damage entry for {distance}m") from None

    def profile_at(
        self,
        distance: float,
        hp: float = 100.0,
        target_radius: float = 0.17
    ) -> WeaponProfile:
        """Resolve this weapon at one listed distance into an engine profile."""
        return WeaponProfile(
            damage_per_hit=self.damage_at(distance),
            rpm=self.rpm,
            distance=float(distance),
            precision=self.precision,
            control=self.control,
            hp=hp,
            target_radius=target_radius,
            name=self.name,
        )


def _number(name: str, field_name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CatalogError(f"{name}: '{field_name}' must be a number, got {value!r}")
    return float(value)


def parse_weapon(name: str, record: Mapping[str, Any]) -> WeaponStats:
    """Parse one catalog record."""
    if not isinstance(record, Mapping):
        raise CatalogError(f"{name}: record must be an object")

    missing = [key for key in ("control", "precision", "rpm", "damage") if key not in record]
    if missing:
        raise CatalogError(f"{name}: missing fields {', '.join(missing)}")

    raw_damage = record["damage"]
    if not isinstance(raw_damage, Mapping) or not raw_damage:
        raise CatalogError(f"{name}: 'damage' must be a non-empty object")

    damage: Dict[float, float] = {}
    for distance_key, value in raw_damage.items():
        try:
            distance = float(distance_key)
        except (TypeError, ValueError):
            raise CatalogError(f"{name}: damage distance {distance_key!r} is not numeric") from None
        damage[distance] = _number(name, f"damage[{distance_key}]", value)

    rpm = _number(name, "rpm", record["rpm"])
    if rpm <= 0:
        raise CatalogError(f"{name}: 'rpm' must be > 0")

    return WeaponStats(
        name=name,
        category=WeaponCategory.parse(record.get("category")),
        control=_number(name, "control", record["control"]),
        precision=_number(name, "precision", record["precision"]),
        rpm=rpm,
        damage=dict(sorted(damage.items())),
    )


class WeaponCatalog:
    """In-memory weapon catalog."""

    def __init__(self, weapons: Optional[Iterable[WeaponStats]] = None):
        self.weapons: Dict[str, WeaponStats] = {}
        for weapon in weapons or []:
            self.weapons[weapon.name] = weapon

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WeaponCatalog":
        if not isinstance(data, Mapping):
            raise CatalogError("catalog must be an object mapping weapon names to records")
        return cls(parse_weapon(name, record) for name, record in data.items())

    @classmethod
    def load(cls, path: Union[str, Path] = DEFAULT_CATALOG_PATH) -> "WeaponCatalog":
        """Load a catalog from a JSON file."""
        path = Path(path)
        logger.info(f"Loading weapon catalog from {path}")
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid catalog JSON in {path}: {e}")
            raise CatalogError(f"{path}: invalid JSON ({e})") from e

        catalog = cls.from_dict(data)
        logger.info(f"Loaded {len(catalog)} weapons")
        return catalog

    def __len__(self) -> int:
        return len(self.weapons)

    def __contains__(self, name: str) -> bool:
        return self.get_weapon(name) is not None

    def names(self) -> List[str]:
        return list(self.weapons)

    def get_weapon(self, weapon_name: str) -> Optional[WeaponStats]:
        """Get weapon by name (case-insensitive, ignores spaces and dashes)."""
        if weapon_name in self.weapons:
            return self.weapons[weapon_name]
        normalized = _normalize_name(weapon_name)
        for name, weapon in self.weapons.items():
            if _normalize_name(name) == normalized:
                return weapon
        return None

    def distances(self, names: Optional[Iterable[str]] = None) -> List[float]:
        """Union of listed distances across the given (or all) weapons."""
        weapons = self.weapons.values() if names is None else self.select(names)
        return sorted({d for weapon in weapons for d in weapon.damage})

    def select(self, names: Iterable[str]) -> List[WeaponStats]:
        """Look up several weapons in order; unknown names raise KeyError."""
        selected = []
        for name in names:
            weapon = self.get_weapon(name)
            if weapon is None:
                raise KeyError(f"Unknown weapon: {name}")
            selected.append(weapon)
        return selected


def _normalize_name(name: str) -> str:
    return name.lower().replace(" ", "").replace("-", "")


@dataclass
class DamageTable:
    """Damage per hit by distance for several weapons."""
    distances: List[float]
    # weapon name -> distance -> damage (missing when not listed)
    rows: Dict[str, Dict[float, float]]
    # distance -> highest damage in that column
    best: Dict[float, float]


def damage_table(weapons: Iterable[WeaponStats]) -> DamageTable:
    """Build a damage comparison over the union of listed distances."""
    weapons = list(weapons)
    distances = sorted({d for weapon in weapons for d in weapon.damage})
    rows = {
        weapon.name: {d: weapon.damage[d] for d in distances if d in weapon.damage}
        for weapon in weapons
    }

    best: Dict[float, float] = {}
    for distance in distances:
        values = [row[distance] for row in rows.values() if distance in row]
        if values:
            best[distance] = max(values)

    return DamageTable(distances=distances, rows=rows, best=best)
