"""
Dish commands: CRUD, batches, and bulk price/availability updates.
"""
from decimal import Decimal
from typing import Optional

from kitchenops.commands.entity import (
    AddEntityCommand,
    BatchAddEntitiesCommand,
    BatchDeleteEntitiesCommand,
    BatchUpdateEntitiesCommand,
    DeleteEntityCommand,
    EntityRules,
    UpdateEntityCommand,
)
from kitchenops.core.errors import ValidationError
from kitchenops.db.store import CatalogStore, EntityKind
from kitchenops.models import Dish
from kitchenops.services.cost_calculator import CostCalculator


class DishRules(EntityRules):
    kind = EntityKind.DISH
    label = "dish"
    label_plural = "dishes"

    def _check_references(self, entity: Dish) -> None:
        missing = [i for i in entity.ingredients if not self.store.contains(EntityKind.INGREDIENT, i)]
        if missing:
            raise ValidationError(f"Dish '{entity.id}' references unknown ingredients: {', '.join(missing)}")

    def _check_removable(self, entity_id: str) -> None:
        combos = self.store.combos_containing_dish(entity_id)
        if combos:
            names = ", ".join(c.id for c in combos)
            raise ValidationError(f"Dish '{entity_id}' is part of combos: {names}")

    def _prepare(self, entity: Dish) -> Dish:
        return CostCalculator(self.store).refresh_dish(entity)

    def _refresh_dependents(self, entity_id: str) -> None:
        """Recompute original price and cost of combos containing the dish."""
        calculator = CostCalculator(self.store)
        for combo in self.store.combos_containing_dish(entity_id):
            refreshed = calculator.refresh_combo(combo)
            if refreshed != combo:
                self._write(EntityKind.COMBO, refreshed)


class AddDishCommand(DishRules, AddEntityCommand):
    pass


class UpdateDishCommand(DishRules, UpdateEntityCommand):
    pass


class DeleteDishCommand(DishRules, DeleteEntityCommand):
    pass


class BatchAddDishesCommand(DishRules, BatchAddEntitiesCommand):
    pass


class BatchUpdateDishesCommand(DishRules, BatchUpdateEntitiesCommand):
    pass


class BatchDeleteDishesCommand(DishRules, BatchDeleteEntitiesCommand):
    pass


def dish_price_adjustment(store: CatalogStore, percent: Decimal,
                          category: Optional[str] = None) -> BatchUpdateDishesCommand:
    """
    Batch update changing dish prices by a percentage.

    Applies to every dish, or only to dishes in ``category`` when given.
    """
    percent = Decimal(percent)
    if percent < -100:
        raise ValidationError("Price change cannot be below -100%")

    updated = []
    for dish in store.list_dishes():
        if category and dish.category != category:
            continue
        dish.price = dish.price * (1 + percent / 100)
        updated.append(dish)

    if not updated:
        raise ValidationError(f"No dishes in category '{category}'" if category else "No dishes to update")
    return BatchUpdateDishesCommand(store, updated, label=f"Reprice ({percent}%)")


def dish_availability_update(store: CatalogStore, is_available: bool,
                             category: Optional[str] = None) -> BatchUpdateDishesCommand:
    """Batch update setting the availability flag of every dish (or of a category)."""
    updated = []
    for dish in store.list_dishes():
        if category and dish.category != category:
            continue
        dish.is_available = is_available
        updated.append(dish)

    if not updated:
        raise ValidationError(f"No dishes in category '{category}'" if category else "No dishes to update")
    label = "Enable" if is_available else "Disable"
    return BatchUpdateDishesCommand(store, updated, label=label)
