"""Economy catalog: crops, animals, structures, renovations and tools."""

from __future__ import annotations

from typing import Optional

from agri_sim.core.config import CROP_BASE_VALUE, DEFAULT_LIVESTOCK_YIELD


# Occupancy kinds a tile can hold
EMPTY = "EMPTY"
CROP = "CROP"
LIVESTOCK = "LIVESTOCK"
STRUCTURE = "STRUCTURE"

UPGRADE_SUFFIX = "_upgraded"


# =============================================================================
# Purchasable assets
# =============================================================================

CROP_DATA: dict[str, dict] = {
    "paddyRice": {"cost": 20.0, "earn": 40.0, "risk": "Low"},
    "sugarcane": {"cost": 30.0, "earn": 70.0, "risk": "Moderate"},
    "dragonFruit": {"cost": 65.0, "earn": 120.0, "risk": "High"},
    "durian": {"cost": 120.0, "earn": 900.0, "risk": "Extremely High"},
}

ANIMAL_DATA: dict[str, dict] = {
    "duck": {"cost": 70.0, "earn": 100.0, "requires": ["barn"]},
    "fish": {"cost": 90.0, "earn": 140.0, "requires": ["pond", "well"]},
    "pig": {"cost": 120.0, "earn": 250.0, "requires": ["well", "barn"]},
    "shrimp": {"cost": 200.0, "earn": 1200.0, "requires": ["pond", "waterAerator"]},
}

STRUCTURE_DATA: dict[str, dict] = {
    "pond": {"cost": 200.0},
    "barn": {"cost": 150.0},
    "well": {"cost": 250.0},
    "waterAerator": {"cost": 300.0},
    "fence": {"cost": 400.0},
    "silo": {"cost": 1200.0},
    "comm_tower": {"cost": 900.0},
    "paved_road": {"cost": 500.0},
}

# Older farms still carry these; they harvest but are no longer sold.
_LEGACY_CROP_YIELDS: dict[str, float] = {
    "corn": 80.0,
    "wheat": 120.0,
    "coffee": 400.0,
    "cotton": 250.0,
    "peanuts": 180.0,
    "poppies": 500.0,
}

_LEGACY_LIVESTOCK_YIELDS: dict[str, float] = {
    "chicken": 22.0,
    "cow": 360.0,
    "sheep": 200.0,
}

# structure id -> (upgraded id, renovation cost)
RENOVATIONS: dict[str, tuple[str, float]] = {
    "well": ("well" + UPGRADE_SUFFIX, 400.0),
    "fence": ("fence" + UPGRADE_SUFFIX, 200.0),
    "silo": ("silo" + UPGRADE_SUFFIX, 600.0),
}

TOOLS: tuple[str, ...] = ("handTools", "animalPlow", "tractor", "tractorRenovated", "harvester")

# Structure classes the year-end pipeline looks for
BARN_CLASS = "barn"
WELL_CLASS = "well"
ROAD_CLASS = "paved_road"
FORECAST_CLASS = "comm_tower"


# =============================================================================
# Lookups
# =============================================================================

def lookup(asset_id: str) -> Optional[tuple[str, float]]:
    """Resolve a purchasable id to (occupancy kind, cost), or None."""
    if asset_id in CROP_DATA:
        return CROP, CROP_DATA[asset_id]["cost"]
    if asset_id in ANIMAL_DATA:
        return LIVESTOCK, ANIMAL_DATA[asset_id]["cost"]
    if asset_id in STRUCTURE_DATA:
        return STRUCTURE, STRUCTURE_DATA[asset_id]["cost"]
    return None


def prerequisites(animal_id: str) -> list[str]:
    return list(ANIMAL_DATA.get(animal_id, {}).get("requires", []))


def crop_yield(crop_id: str) -> float:
    if crop_id in CROP_DATA:
        return CROP_DATA[crop_id]["earn"]
    return _LEGACY_CROP_YIELDS.get(crop_id, CROP_BASE_VALUE)


def livestock_yield(animal_id: str) -> float:
    """Yearly income per head."""
    if animal_id in ANIMAL_DATA:
        return ANIMAL_DATA[animal_id]["earn"]
    return _LEGACY_LIVESTOCK_YIELDS.get(animal_id, DEFAULT_LIVESTOCK_YIELD)


def structure_class(content_id: str) -> str:
    """``well_upgraded`` belongs to the ``well`` class."""
    if content_id.endswith(UPGRADE_SUFFIX):
        return content_id[: -len(UPGRADE_SUFFIX)]
    return content_id


def renovation_for(content_id: str) -> Optional[tuple[str, float]]:
    return RENOVATIONS.get(content_id)
