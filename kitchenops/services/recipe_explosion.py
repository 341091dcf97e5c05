"""
Recipe explosion for order fulfillment.

Converts order lines into the ingredient quantities they consume, expanding
combos into their member dishes and summing demand per ingredient, then
checks the totals against on-hand stock.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional, Union

from kitchenops.core.errors import FulfillmentError, InsufficientStockError
from kitchenops.db.store import CatalogStore
from kitchenops.models import Combo, Dish, OrderItem


@dataclass
class IngredientRequirement:
    """Total demand for one ingredient across an order."""
    ingredient_id: str
    total_quantity: Decimal


@dataclass
class ExplosionResult:
    """Resolved requirement of a set of order lines."""
    requirements: list[IngredientRequirement]  # First-seen ingredient order
    dish_sales: dict[str, int] = field(default_factory=dict)  # dish id -> units sold as a dish line
    combo_sales: dict[str, int] = field(default_factory=dict)  # combo id -> units sold

    def as_mapping(self) -> dict[str, Decimal]:
        return {r.ingredient_id: r.total_quantity for r in self.requirements}


class RecipeExplosionService:
    """
    Explodes order lines into ingredient requirements.

    Mathematical Model:
    demand_j = Σ_i (qty_i × Σ_d∈dishes(i) recipe_qty_dj)

    Where:
    - qty_i = quantity ordered on line i
    - dishes(i) = the dish itself, or the member dishes of a combo
    - recipe_qty_dj = quantity of ingredient j per serving of dish d

    Demand is summed per ingredient before any stock check so that two lines
    sharing an ingredient are checked against their combined total.
    """

    def __init__(self, store: CatalogStore):
        self.store = store

    def explode_items(self, items: Iterable[OrderItem]) -> ExplosionResult:
        """
        Resolve order lines against the current catalog.

        Raises:
            FulfillmentError: a line references a dish or combo (or a combo
                              member) that is no longer in the catalog
        """
        totals: dict[str, Decimal] = {}
        dish_sales: dict[str, int] = {}
        combo_sales: dict[str, int] = {}

        for item in items:
            if item.is_combo:
                combo = self.store.get_combo(item.item_id)
                if combo is None:
                    raise FulfillmentError(f"Combo '{item.item_id}' is no longer in the catalog")
                dishes = [self._member_dish(combo, dish_id) for dish_id in combo.dish_ids]
                combo_sales[combo.id] = combo_sales.get(combo.id, 0) + item.quantity
            else:
                dish = self.store.get_dish(item.item_id)
                if dish is None:
                    raise FulfillmentError(f"Dish '{item.item_id}' is no longer in the catalog")
                dishes = [dish]
                dish_sales[dish.id] = dish_sales.get(dish.id, 0) + item.quantity

            for dish in dishes:
                self._accumulate(totals, dish, item.quantity)

        return ExplosionResult(
            requirements=[IngredientRequirement(ing_id, qty) for ing_id, qty in totals.items()],
            dish_sales=dish_sales,
            combo_sales=combo_sales,
        )

    def explode_menu_item(self, menu_item: Union[Dish, Combo], quantity: int = 1) -> ExplosionResult:
        """Resolve a single dish or combo as if ordered ``quantity`` times."""
        line = OrderItem(
            item_id=menu_item.id,
            is_combo=isinstance(menu_item, Combo),
            name=menu_item.name,
            quantity=quantity,
            unit_price=Decimal(0),
        )
        return self.explode_items([line])

    def find_shortfall(self, result: ExplosionResult) -> Optional[InsufficientStockError]:
        """First requirement that stock cannot cover, or None if all are covered."""
        for requirement in result.requirements:
            ingredient = self.store.get_ingredient(requirement.ingredient_id)
            available = ingredient.quantity if ingredient is not None else Decimal(0)
            if available < requirement.total_quantity:
                return InsufficientStockError(
                    ingredient_id=requirement.ingredient_id,
                    required=requirement.total_quantity,
                    available=available,
                    ingredient_name=ingredient.name if ingredient is not None else None,
                )
        return None

    def check_availability(self, result: ExplosionResult) -> None:
        """Raise InsufficientStockError for the first uncovered requirement."""
        shortfall = self.find_shortfall(result)
        if shortfall is not None:
            raise shortfall

    def is_fulfillable(self, menu_item: Union[Dish, Combo]) -> bool:
        """
        Whether one unit of a dish or combo can be made from current stock.

        For a combo the member recipes are summed, so a combo whose members
        compete for the same ingredient needs enough stock for all of them.
        """
        try:
            result = self.explode_menu_item(menu_item)
        except FulfillmentError:
            return False
        return self.find_shortfall(result) is None

    def _member_dish(self, combo: Combo, dish_id: str) -> Dish:
        dish = self.store.get_dish(dish_id)
        if dish is None:
            raise FulfillmentError(f"Combo '{combo.id}' contains dish '{dish_id}' which is no longer in the catalog")
        return dish

    @staticmethod
    def _accumulate(totals: dict[str, Decimal], dish: Dish, servings: int) -> None:
        for ingredient_id, qty in dish.ingredients.items():
            totals[ingredient_id] = totals.get(ingredient_id, Decimal(0)) + qty * servings
