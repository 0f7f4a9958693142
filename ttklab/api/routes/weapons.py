"""Weapon catalog API routes."""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import get_catalog, distance_label
from ...schemas.weapons import WeaponResponse, DamageTableResponse
from ...services.weapon_catalog import WeaponCatalog, WeaponStats, damage_table

router = APIRouter()


def _weapon_response(weapon: WeaponStats) -> WeaponResponse:
    return WeaponResponse(
        name=weapon.name,
        category=weapon.category.value,
        control=weapon.control,
        precision=weapon.precision,
        rpm=weapon.rpm,
        damage={distance_label(d): dmg for d, dmg in weapon.damage.items()},
    )


@router.get("/", response_model=List[WeaponResponse])
async def list_weapons(
    category: Optional[str] = Query(None),
    catalog: WeaponCatalog = Depends(get_catalog),
):
    """List catalog weapons, optionally filtered by category."""
    weapons = catalog.weapons.values()
    if category:
        weapons = [w for w in weapons if w.category.value == category.lower()]
    return [_weapon_response(w) for w in weapons]


@router.get("/damage-table", response_model=DamageTableResponse)
async def get_damage_table(
    names: List[str] = Query(...),
    catalog: WeaponCatalog = Depends(get_catalog),
):
    """Damage per hit by distance for the selected weapons."""
    try:
        weapons = catalog.select(names)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))

    table = damage_table(weapons)
    return DamageTableResponse(
        distances=table.distances,
        rows={
            name: {distance_label(d): row.get(d) for d in table.distances}
            for name, row in table.rows.items()
        },
        best={distance_label(d): v for d, v in table.best.items()},
    )


@router.get("/{weapon_name}", response_model=WeaponResponse)
async def get_weapon(weapon_name: str, catalog: WeaponCatalog = Depends(get_catalog)):
    """Get one weapon by name."""
    weapon = catalog.get_weapon(weapon_name)
    if weapon is None:
        raise HTTPException(status_code=404, detail=f"Weapon {weapon_name} not found")
    return _weapon_response(weapon)
