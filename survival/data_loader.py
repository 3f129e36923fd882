"""
Frostbound - survival/data_loader.py
JIT Data Loaders for TOML seed data powered by Pydantic.
=============================================================================================
Version:     0.4 (activities, bodies, items, location templates)
Stack:       Python 3.11+ | Pydantic v2 | tomllib
Status:      Core data validation and loading layer.
"""

import tomllib
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict


class ConfigurationError(LookupError):
    """Seed data is missing an entry the code expects to exist."""


# ================================================================================
# SCHEMAS
# ================================================================================

class ActivityDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str
    status_text: str
    event_multiplier: float = Field(ge=0.0)
    activity_level: float = Field(gt=0.0)
    fire_proximity: float = Field(ge=0.0)
    energy_recovery: float = Field(default=0.0, ge=0.0) # energy minutes restored per minute

class ActivityCollectionDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    activities: List[ActivityDef]

class BodyPartDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str
    name: str
    capacity: Optional[str] = None # Capacity value, e.g. "Moving"
    max_health: float = Field(gt=0.0)
    coverage: float = Field(default=0.0, ge=0.0)
    vital: bool = False
    limb: bool = False

class BodyDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str
    name: str
    parts: List[BodyPartDef]

class FoodDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    calories: float = Field(default=0.0, ge=0.0)
    water: float = Field(default=0.0, ge=0.0)

class ItemDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str
    name: str
    description: str
    value: int = 1
    tags: Dict[str, bool] = Field(default_factory=dict)
    stackable: Optional[Dict[str, int]] = None
    food: Optional[FoodDef] = None
    fuel_hours: Optional[float] = Field(default=None, gt=0.0)

class ForageEntryDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    item: str # item path under data/items, e.g. "forage/berries"
    abundance: float = Field(gt=0.0)

class CampfireDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    heat_output: float = Field(default=15.0, ge=0.0)
    fuel_capacity: float = Field(default=8.0, gt=0.0)
    fuel_consumption_rate: float = Field(default=1.0, ge=0.0)
    starting_fuel: float = Field(default=0.0, ge=0.0)

class LocationTemplateDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str
    name: str
    kind: str # tagged variant: "forest" | "clearing" | "riverbank" | "tundra"
    temperature: float # °F, daytime
    resource_density: float = Field(default=1.0, ge=0.0)
    campfire: Optional[CampfireDef] = None
    forage: List[ForageEntryDef] = Field(default_factory=list)

class LocationCollectionDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    locations: List[LocationTemplateDef]

# ================================================================================
# LOADERS & CACHE (JIT)
# ================================================================================

_ACTIVITY_CACHE: Optional[Dict[str, ActivityDef]] = None
_BODY_CACHE: Dict[str, BodyDef] = {}
_ITEM_CACHE: Dict[str, ItemDef] = {}
_LOCATION_CACHE: Optional[Dict[str, LocationTemplateDef]] = None


DATA_DIR = Path(__file__).parent.parent / "data"

def _load_toml(path: Path) -> dict:
    with open(path, "rb") as f:
        return tomllib.load(f)

def get_activity_defs() -> Dict[str, ActivityDef]:
    """Loads the activity table keyed by activity id. Cached globally."""
    global _ACTIVITY_CACHE
    if _ACTIVITY_CACHE is not None:
        return _ACTIVITY_CACHE

    path = DATA_DIR / "activities.toml"
    if not path.exists():
        raise FileNotFoundError(f"Activity table not found: {path}")

    collection = ActivityCollectionDef(**_load_toml(path))
    _ACTIVITY_CACHE = {a.id: a for a in collection.activities}
    return _ACTIVITY_CACHE

def get_body_def(body_id: str) -> BodyDef:
    """JIT loads a body template from TOML (e.g. 'human')."""
    if body_id in _BODY_CACHE:
        return _BODY_CACHE[body_id]

    path = DATA_DIR / "bodies" / f"{body_id}.toml"
    if not path.exists():
        raise FileNotFoundError(f"Body definition not found: {path}")

    body = BodyDef(**_load_toml(path))
    _BODY_CACHE[body_id] = body
    return body

def get_item_def(item_path: str) -> ItemDef:
    """JIT loads an item definition from TOML (e.g. 'forage/berries')."""
    if item_path in _ITEM_CACHE:
        return _ITEM_CACHE[item_path]

    path = DATA_DIR / "items" / f"{item_path}.toml"
    if not path.exists():
        raise FileNotFoundError(f"Item definition not found: {path}")

    item = ItemDef(**_load_toml(path))
    _ITEM_CACHE[item_path] = item
    return item

def get_location_templates() -> Dict[str, LocationTemplateDef]:
    """Loads all location templates keyed by id. Cached globally."""
    global _LOCATION_CACHE
    if _LOCATION_CACHE is not None:
        return _LOCATION_CACHE

    path = DATA_DIR / "locations.toml"
    if not path.exists():
        raise FileNotFoundError(f"Location templates not found: {path}")

    collection = LocationCollectionDef(**_load_toml(path))
    _LOCATION_CACHE = {t.id: t for t in collection.locations}
    return _LOCATION_CACHE

def get_location_template(template_id: str) -> LocationTemplateDef:
    templates = get_location_templates()
    if template_id not in templates:
        raise ConfigurationError(f"Unknown location template: {template_id!r}")
    return templates[template_id]
