"""
Cost calculator for dishes and combos.

Derives a dish's cost from its recipe and current ingredient prices, and a
combo's original price and cost from its member dishes. All functions read
catalog snapshots and never mutate the store.
"""
from dataclasses import dataclass
from decimal import Decimal

from kitchenops.db.store import CatalogStore
from kitchenops.models import Combo, Dish


@dataclass
class IngredientCost:
    """Cost line for a single ingredient in a recipe."""
    ingredient_id: str
    ingredient_name: str
    quantity: Decimal
    unit: str
    unit_cost: Decimal
    line_cost: Decimal  # quantity * unit_cost


@dataclass
class DishCostResult:
    """Full cost breakdown for a dish."""
    dish_id: str
    dish_name: str
    dish_price: Decimal
    total_cost: Decimal
    ingredient_breakdown: list[IngredientCost]
    missing_ingredient_ids: list[str]  # Referenced but not in the catalog
    contribution_margin: Decimal  # price - cost
    margin_percentage: Decimal  # (contribution_margin / price) * 100


class CostCalculator:
    """
    Calculates dish and combo costs.

    Cost Formula:
    dish_cost = Σ (ingredient_qty × price_per_unit)

    Ingredients missing from the catalog contribute nothing to the cost.
    Combo members missing from the catalog contribute nothing to the combo's
    original price or cost.
    """

    def __init__(self, store: CatalogStore):
        self.store = store

    def dish_cost(self, dish: Dish) -> Decimal:
        return self.dish_cost_breakdown(dish).total_cost

    def dish_cost_breakdown(self, dish: Dish) -> DishCostResult:
        breakdown = []
        missing = []
        for ingredient_id, qty in dish.ingredients.items():
            ingredient = self.store.get_ingredient(ingredient_id)
            if ingredient is None:
                missing.append(ingredient_id)
                continue

            breakdown.append(IngredientCost(
                ingredient_id=ingredient.id,
                ingredient_name=ingredient.name,
                quantity=qty,
                unit=ingredient.unit,
                unit_cost=ingredient.price_per_unit,
                line_cost=qty * ingredient.price_per_unit
            ))

        total_cost = sum((ic.line_cost for ic in breakdown), Decimal(0))
        contribution_margin = dish.price - total_cost
        margin_pct = (contribution_margin / dish.price * 100) if dish.price else Decimal(0)

        return DishCostResult(
            dish_id=dish.id,
            dish_name=dish.name,
            dish_price=dish.price,
            total_cost=total_cost,
            ingredient_breakdown=breakdown,
            missing_ingredient_ids=missing,
            contribution_margin=contribution_margin,
            margin_percentage=margin_pct
        )

    def combo_original_price(self, combo: Combo) -> Decimal:
        total = Decimal(0)
        for dish_id in combo.dish_ids:
            dish = self.store.get_dish(dish_id)
            if dish is not None:
                total += dish.price
        return total

    def combo_cost(self, combo: Combo) -> Decimal:
        total = Decimal(0)
        for dish_id in combo.dish_ids:
            dish = self.store.get_dish(dish_id)
            if dish is not None:
                total += self.dish_cost(dish)
        return total

    def combo_final_price(self, combo: Combo) -> Decimal:
        return self.combo_original_price(combo) * (1 - combo.discount_percent / 100)

    def refresh_dish(self, dish: Dish) -> Dish:
        """Return a copy of the dish with its cached cost recomputed."""
        refreshed = dish.snapshot()
        refreshed.cost = self.dish_cost(dish)
        return refreshed

    def refresh_combo(self, combo: Combo) -> Combo:
        """Return a copy of the combo with original price and cost recomputed."""
        refreshed = combo.snapshot()
        refreshed.original_price = self.combo_original_price(combo)
        refreshed.cost = self.combo_cost(combo)
        return refreshed

