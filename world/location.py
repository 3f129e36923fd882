"""
Frostbound - world/location.py
Location Factory: declarative templates -> location entities with features.
==========================================================================
Version:     0.2
Stack:       Python 3.11+ | python-tcod-ecs | Pydantic v2 (templates)
Status:      Stable.

A location is one entity carrying Location and ForageSampler components.
Heat sources are separate feature entities linked with the "HasFeature"
relation, so a location may hold any number of them (a camp built later
adds another). Found items hang off the "Contains" relation.
"""

from __future__ import annotations

from typing import List, Optional

import tcod.ecs

from survival.data_loader import CampfireDef, get_item_def, get_location_template
from survival.ecs.components import Location
from survival.events import EventBus
from survival.item_factory import item_factory
from world.forage import ForageSampler, CONTAINS
from world.heat_source import HeatSource

HAS_FEATURE = "HasFeature"


def create_location(registry: tcod.ecs.Registry, template_id: str,
                    bus: Optional[EventBus] = None) -> tcod.ecs.Entity:
    template = get_location_template(template_id)

    location = registry.new_entity()
    location.tags.add("location")
    location.tags.add(template.kind)
    location.components[Location] = Location(
        template_id=template.id,
        name=template.name,
        kind=template.kind,
        temperature=template.temperature,
    )

    sampler = ForageSampler(template.resource_density, location=location, bus=bus)
    for entry in template.forage:
        sampler.add_resource(item_factory(registry, entry.item), entry.abundance,
                             name=get_item_def(entry.item).name)
    location.components[ForageSampler] = sampler

    if template.campfire is not None:
        add_heat_source(registry, location, template.campfire, bus=bus)

    return location


def add_heat_source(registry: tcod.ecs.Registry, location: tcod.ecs.Entity,
                    campfire: Optional[CampfireDef] = None, name: str = "Campfire",
                    bus: Optional[EventBus] = None) -> HeatSource:
    """Builds a heat-source feature entity and attaches it to the location."""
    campfire = campfire or CampfireDef()
    fire = HeatSource(
        name=name,
        heat_output=campfire.heat_output,
        fuel_capacity=campfire.fuel_capacity,
        fuel_consumption_rate=campfire.fuel_consumption_rate,
        bus=bus,
    )
    if campfire.starting_fuel > 0:
        fire.add_fuel(campfire.starting_fuel)

    feature = registry.new_entity()
    feature.tags.add("feature")
    feature.tags.add("heat_source")
    feature.components[HeatSource] = fire
    location.relation_tags_many[HAS_FEATURE].add(feature)
    return fire


def heat_sources(location: tcod.ecs.Entity) -> List[HeatSource]:
    return [f.components[HeatSource] for f in location.relation_tags_many[HAS_FEATURE]
            if HeatSource in f.components]


def location_contents(location: tcod.ecs.Entity) -> List[tcod.ecs.Entity]:
    return list(location.relation_tags_many[CONTAINS])
