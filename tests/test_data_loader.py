import pytest
from pydantic import ValidationError

from survival.data_loader import (
    ActivityDef,
    ConfigurationError,
    ForageEntryDef,
    get_activity_defs,
    get_body_def,
    get_item_def,
    get_location_template,
    get_location_templates,
)
import survival.data_loader as data_loader

def test_load_activity_table():
    defs = get_activity_defs()
    assert defs["sleeping"].event_multiplier == 0
    assert defs["fighting"].activity_level == 3.0

def test_load_human_body():
    body = get_body_def("human")
    ids = {p.id for p in body.parts}
    assert {"brain", "heart", "left_lung", "right_leg"} <= ids
    assert sum(p.coverage for p in body.parts) == pytest.approx(1.0)
    vital = {p.id for p in body.parts if p.vital}
    assert vital == {"brain", "heart"}

def test_missing_body_raises():
    with pytest.raises(FileNotFoundError):
        get_body_def("dragon")

def test_load_food_item():
    item = get_item_def("forage/berries")
    assert item.name == "Wild Berries"
    assert item.food.calories == 120
    assert item.stackable["max"] == 20

def test_load_fuel_item():
    item = get_item_def("fuel/sticks")
    assert item.fuel_hours == 0.5
    assert item.food is None

def test_load_location_templates():
    templates = get_location_templates()
    assert {"forest", "clearing", "riverbank", "tundra"} <= set(templates)
    clearing = get_location_template("clearing")
    assert clearing.campfire is not None
    assert clearing.campfire.heat_output == 15.0
    assert all(entry.abundance > 0 for entry in clearing.forage)

def test_every_forage_entry_points_at_an_item():
    for template in get_location_templates().values():
        for entry in template.forage:
            assert get_item_def(entry.item).id

def test_unknown_location_template():
    with pytest.raises(ConfigurationError):
        get_location_template("volcano")

def test_missing_location_table_raises(monkeypatch, tmp_path):
    monkeypatch.setattr(data_loader, "DATA_DIR", tmp_path)
    monkeypatch.setattr(data_loader, "_LOCATION_CACHE", None)
    with pytest.raises(FileNotFoundError):
        get_location_templates()

def test_schema_rejects_out_of_range_rows():
    with pytest.raises(ValidationError):
        ActivityDef(id="bad", status_text="", event_multiplier=1.0, activity_level=0.0, fire_proximity=0.0)
    with pytest.raises(ValidationError):
        ForageEntryDef(item="forage/berries", abundance=0.0)

def test_definitions_are_frozen():
    item = get_item_def("forage/roots")
    with pytest.raises(ValidationError):
        item.name = "Changed"
