"""
Ingredient commands: CRUD, batches, restocking and bulk adjustments.
"""
from decimal import Decimal
from typing import Iterable, List, Optional

from kitchenops.commands.base import CatalogCommand
from kitchenops.commands.entity import (
    AddEntityCommand,
    BatchAddEntitiesCommand,
    BatchDeleteEntitiesCommand,
    BatchUpdateEntitiesCommand,
    DeleteEntityCommand,
    EntityRules,
    UpdateEntityCommand,
)
from kitchenops.core.clock import Clock, now
from kitchenops.core.errors import ValidationError
from kitchenops.db.store import CatalogStore, EntityKind
from kitchenops.models import Ingredient
from kitchenops.schemas.ingredient import IngredientUpdate
from kitchenops.services.cost_calculator import CostCalculator


class IngredientRules(EntityRules):
    kind = EntityKind.INGREDIENT
    label = "ingredient"
    label_plural = "ingredients"

    def _check_removable(self, entity_id: str) -> None:
        users = self.store.dishes_using_ingredient(entity_id)
        if users:
            names = ", ".join(d.id for d in users)
            raise ValidationError(f"Ingredient '{entity_id}' is used by dishes: {names}")

    def _refresh_dependents(self, entity_id: str) -> None:
        """Recompute cached costs of dishes using the ingredient, and of their combos."""
        calculator = CostCalculator(self.store)
        for dish in self.store.dishes_using_ingredient(entity_id):
            refreshed = calculator.refresh_dish(dish)
            if refreshed.cost != dish.cost:
                self._write(EntityKind.DISH, refreshed)
            for combo in self.store.combos_containing_dish(dish.id):
                refreshed_combo = calculator.refresh_combo(combo)
                if refreshed_combo != combo:
                    self._write(EntityKind.COMBO, refreshed_combo)


class AddIngredientCommand(IngredientRules, AddEntityCommand):
    pass


class UpdateIngredientCommand(IngredientRules, UpdateEntityCommand):

    @classmethod
    def from_changes(cls, store: CatalogStore, entity_id: str, changes: IngredientUpdate,
                     clock: Optional[Clock] = None, **overrides):
        overrides.setdefault("last_updated", (clock or now)())
        return super().from_changes(store, entity_id, changes, **overrides)


class DeleteIngredientCommand(IngredientRules, DeleteEntityCommand):
    pass


class BatchAddIngredientsCommand(IngredientRules, BatchAddEntitiesCommand):
    pass


class BatchUpdateIngredientsCommand(IngredientRules, BatchUpdateEntitiesCommand):
    pass


class BatchDeleteIngredientsCommand(IngredientRules, BatchDeleteEntitiesCommand):
    pass


class RestockIngredientCommand(IngredientRules, CatalogCommand):
    """Add received stock to an ingredient."""

    def __init__(self, store: CatalogStore, ingredient_id: str, amount: Decimal,
                 clock: Optional[Clock] = None):
        super().__init__(store)
        if amount <= 0:
            raise ValidationError("Restock amount must be positive")
        self.ingredient = store.require_ingredient(ingredient_id)
        self.amount = Decimal(amount)
        self.clock = clock or now

    def _apply(self) -> None:
        ingredient = self.store.require_ingredient(self.ingredient.id)
        ingredient.quantity += self.amount
        ingredient.last_updated = self.clock()
        self._write(self.kind, ingredient)

    @property
    def description(self) -> str:
        return f"Restock ingredient '{self.ingredient.id}' by {self.amount} {self.ingredient.unit}"


def _select_ingredients(store: CatalogStore, ingredient_ids: Optional[Iterable[str]]) -> List[Ingredient]:
    if ingredient_ids is None:
        return store.list_ingredients()
    return [store.require_ingredient(ingredient_id) for ingredient_id in ingredient_ids]


class AdjustIngredientPricesCommand(IngredientRules, CatalogCommand):
    """
    Change unit prices by a percentage (+ to raise, - to lower).

    Applies to every ingredient when ``ingredient_ids`` is None.
    """

    def __init__(self, store: CatalogStore, percent: Decimal,
                 ingredient_ids: Optional[Iterable[str]] = None, clock: Optional[Clock] = None):
        super().__init__(store)
        self.percent = Decimal(percent)
        if self.percent < -100:
            raise ValidationError("Price change cannot be below -100%")
        self.targets = [ing.id for ing in _select_ingredients(store, ingredient_ids)]
        self.clock = clock or now

    def _apply(self) -> None:
        ingredients = [self.store.require_ingredient(ingredient_id) for ingredient_id in self.targets]
        stamp = self.clock()
        for ingredient in ingredients:
            ingredient.price_per_unit = ingredient.price_per_unit * (1 + self.percent / 100)
            ingredient.last_updated = stamp
            self._write(self.kind, ingredient)
        for ingredient_id in self.targets:
            self._refresh_dependents(ingredient_id)

    @property
    def description(self) -> str:
        return f"Adjust prices of {len(self.targets)} ingredients by {self.percent}%"


class AdjustIngredientQuantitiesCommand(IngredientRules, CatalogCommand):
    """
    Add ``delta`` (may be negative) to on-hand quantities, clamping at zero.

    Applies to every ingredient when ``ingredient_ids`` is None.
    """

    def __init__(self, store: CatalogStore, delta: Decimal,
                 ingredient_ids: Optional[Iterable[str]] = None, clock: Optional[Clock] = None):
        super().__init__(store)
        self.delta = Decimal(delta)
        self.targets = [ing.id for ing in _select_ingredients(store, ingredient_ids)]
        self.clock = clock or now

    def _apply(self) -> None:
        ingredients = [self.store.require_ingredient(ingredient_id) for ingredient_id in self.targets]
        stamp = self.clock()
        for ingredient in ingredients:
            ingredient.quantity = max(Decimal(0), ingredient.quantity + self.delta)
            ingredient.last_updated = stamp
            self._write(self.kind, ingredient)

    @property
    def description(self) -> str:
        return f"Adjust quantities of {len(self.targets)} ingredients by {self.delta}"
