"""
Frostbound - survival/item_factory.py
ECS Entity Factory for Items.
=============================
Version:     0.4
Stack:       Python 3.11+ | python-tcod-ecs
Status:      Item instantiation from TOML blueprints.
"""

import tcod.ecs
from survival.data_loader import get_item_def
from survival.ecs.components import ItemIdentity, Quantity, FoodValue, FuelValue

def create_item(registry: tcod.ecs.Registry, item_path: str) -> tcod.ecs.Entity:
    """Instantiates an item entity from a TOML blueprint (e.g. 'forage/berries')."""
    item_def = get_item_def(item_path)
    entity = registry.new_entity()

    # 1. Base Tags
    for tag, value in item_def.tags.items():
        if value:
            entity.tags.add(tag)

    # 2. Identity
    entity.components[ItemIdentity] = ItemIdentity(
        entity_id=item_def.id,
        name=item_def.name,
        description=item_def.description,
        template_origin=item_path,
        value=item_def.value
    )

    # 3. Quantity (if stackable)
    if item_def.stackable:
        entity.components[Quantity] = Quantity(
            amount=1,
            max_stack=item_def.stackable.get("max", 1)
        )

    # 4. Edible / burnable
    if item_def.food:
        entity.components[FoodValue] = FoodValue(calories=item_def.food.calories, water=item_def.food.water)
        entity.tags.add("food")
    if item_def.fuel_hours:
        entity.components[FuelValue] = FuelValue(hours=item_def.fuel_hours)
        entity.tags.add("fuel")

    return entity

def item_factory(registry: tcod.ecs.Registry, item_path: str):
    """Zero-argument factory bound to one blueprint, for forage registration."""
    def _factory() -> tcod.ecs.Entity:
        return create_item(registry, item_path)
    _factory.__name__ = get_item_def(item_path).name
    return _factory
