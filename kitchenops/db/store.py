"""
In-memory catalog store.

The store holds every entity by value: reads return detached copies and
writes store copies, so no caller can alias a live entry. Only commands
call ``put``/``remove``; everything else goes through the query accessors.
"""
import logging
from enum import Enum
from typing import Dict, List, Optional, Union

from kitchenops.core.errors import NotFoundError
from kitchenops.models import Combo, Dish, Ingredient, Order
from kitchenops.schemas.catalog import CatalogSnapshot

logger = logging.getLogger(__name__)

Entity = Union[Ingredient, Dish, Combo, Order]


class EntityKind(str, Enum):
    """Collections held by the catalog store."""
    INGREDIENT = "ingredient"
    DISH = "dish"
    COMBO = "combo"
    ORDER = "order"


ENTITY_TYPES = {
    EntityKind.INGREDIENT: Ingredient,
    EntityKind.DISH: Dish,
    EntityKind.COMBO: Combo,
    EntityKind.ORDER: Order,
}


class CatalogStore:
    """Keyed collections of ingredients, dishes, combos and orders."""

    def __init__(self):
        self._collections: Dict[EntityKind, Dict[str, Entity]] = {kind: {} for kind in EntityKind}

    # Generic access

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        entity = self._collections[kind].get(entity_id)
        return entity.snapshot() if entity is not None else None

    def require(self, kind: EntityKind, entity_id: str) -> Entity:
        entity = self.get(kind, entity_id)
        if entity is None:
            raise NotFoundError(kind.value, entity_id)
        return entity

    def contains(self, kind: EntityKind, entity_id: str) -> bool:
        return entity_id in self._collections[kind]

    def list_all(self, kind: EntityKind) -> List[Entity]:
        return [entity.snapshot() for entity in self._collections[kind].values()]

    def count(self, kind: EntityKind) -> int:
        return len(self._collections[kind])

    def put(self, kind: EntityKind, entity: Entity) -> None:
        """Insert or replace an entity. Reserved for commands."""
        expected = ENTITY_TYPES[kind]
        if not isinstance(entity, expected):
            raise TypeError(f"Expected {expected.__name__} for {kind.value}, got {type(entity).__name__}")
        self._collections[kind][entity.id] = entity.snapshot()

    def remove(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        """Remove an entity and return it. Reserved for commands."""
        return self._collections[kind].pop(entity_id, None)

    def index_of(self, kind: EntityKind, entity_id: str) -> Optional[int]:
        """Position of an entity in enumeration order, or None if absent."""
        for index, key in enumerate(self._collections[kind]):
            if key == entity_id:
                return index
        return None

    def restore(self, kind: EntityKind, entity: Entity, index: int) -> None:
        """
        Reinsert an entity at a given position in enumeration order.
        Reserved for commands undoing a removal.
        """
        expected = ENTITY_TYPES[kind]
        if not isinstance(entity, expected):
            raise TypeError(f"Expected {expected.__name__} for {kind.value}, got {type(entity).__name__}")
        items = [(key, value) for key, value in self._collections[kind].items() if key != entity.id]
        items.insert(index, (entity.id, entity.snapshot()))
        self._collections[kind] = dict(items)

    # Typed lookups

    def get_ingredient(self, ingredient_id: str) -> Optional[Ingredient]:
        return self.get(EntityKind.INGREDIENT, ingredient_id)

    def get_dish(self, dish_id: str) -> Optional[Dish]:
        return self.get(EntityKind.DISH, dish_id)

    def get_combo(self, combo_id: str) -> Optional[Combo]:
        return self.get(EntityKind.COMBO, combo_id)

    def get_order(self, order_id: str) -> Optional[Order]:
        return self.get(EntityKind.ORDER, order_id)

    def require_ingredient(self, ingredient_id: str) -> Ingredient:
        return self.require(EntityKind.INGREDIENT, ingredient_id)

    def require_dish(self, dish_id: str) -> Dish:
        return self.require(EntityKind.DISH, dish_id)

    def require_combo(self, combo_id: str) -> Combo:
        return self.require(EntityKind.COMBO, combo_id)

    def require_order(self, order_id: str) -> Order:
        return self.require(EntityKind.ORDER, order_id)

    def list_ingredients(self) -> List[Ingredient]:
        return self.list_all(EntityKind.INGREDIENT)

    def list_dishes(self) -> List[Dish]:
        return self.list_all(EntityKind.DISH)

    def list_combos(self) -> List[Combo]:
        return self.list_all(EntityKind.COMBO)

    def list_orders(self) -> List[Order]:
        return self.list_all(EntityKind.ORDER)

    # Reference queries

    def low_stock_ingredients(self) -> List[Ingredient]:
        return [ing for ing in self.list_ingredients() if ing.is_low_stock]

    def dishes_using_ingredient(self, ingredient_id: str) -> List[Dish]:
        return [dish for dish in self.list_dishes() if ingredient_id in dish.ingredients]

    def combos_containing_dish(self, dish_id: str) -> List[Combo]:
        return [combo for combo in self.list_combos() if dish_id in combo.dish_ids]

    # Persistence hooks

    def export_snapshot(self) -> CatalogSnapshot:
        """Copy every collection into a serializable snapshot."""
        return CatalogSnapshot(
            ingredients=self.list_ingredients(),
            dishes=self.list_dishes(),
            combos=self.list_combos(),
            orders=self.list_orders(),
        )

    def load_snapshot(self, snapshot: CatalogSnapshot) -> None:
        """Replace the whole store with the contents of a snapshot."""
        collections: Dict[EntityKind, Dict[str, Entity]] = {kind: {} for kind in EntityKind}
        for kind, entities in (
            (EntityKind.INGREDIENT, snapshot.ingredients),
            (EntityKind.DISH, snapshot.dishes),
            (EntityKind.COMBO, snapshot.combos),
            (EntityKind.ORDER, snapshot.orders),
        ):
            for entity in entities:
                collections[kind][entity.id] = entity.snapshot()
        self._collections = collections
        logger.info(f"Loaded catalog snapshot with {snapshot.entity_count} entities")
