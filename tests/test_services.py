"""
Tests for the cost calculator and recipe explosion.
"""
from decimal import Decimal

import pytest

from kitchenops.commands import CreateOrderCommand, RestockIngredientCommand
from kitchenops.core.errors import FulfillmentError, InsufficientStockError
from kitchenops.db.store import EntityKind
from kitchenops.models import Combo, Dish, OrderItem
from kitchenops.services.cost_calculator import CostCalculator
from kitchenops.services.ordering import OrderBuilder
from kitchenops.services.recipe_explosion import RecipeExplosionService


class TestCostCalculator:
    """Dish and combo costing."""

    def test_dish_cost(self, catalog):
        """cost = Σ qty × price_per_unit."""
        calc = CostCalculator(catalog)
        assert calc.dish_cost(catalog.get_dish("FRIEDRICE")) == Decimal("5000")
        assert calc.dish_cost(catalog.get_dish("STEAK")) == Decimal("50500")

    def test_breakdown_and_margin(self, catalog):
        """Breakdown lists each ingredient and the contribution margin."""
        result = CostCalculator(catalog).dish_cost_breakdown(catalog.get_dish("FRIEDRICE"))

        assert [line.ingredient_id for line in result.ingredient_breakdown] == ["RICE", "SALT"]
        assert result.ingredient_breakdown[0].line_cost == Decimal("4000")
        assert result.contribution_margin == Decimal("35000")
        assert result.margin_percentage == Decimal("87.5")
        assert result.missing_ingredient_ids == []

    def test_missing_ingredient_contributes_nothing(self, catalog):
        """Recipe entries without a catalog ingredient are reported and skipped."""
        dish = Dish(id="X", name="X", price=Decimal("0"),
                    ingredients={"SALT": Decimal("2"), "GONE": Decimal("1")})
        result = CostCalculator(catalog).dish_cost_breakdown(dish)

        assert result.total_cost == Decimal("2000")
        assert result.missing_ingredient_ids == ["GONE"]
        assert result.margin_percentage == Decimal("0")

    def test_combo_prices(self, catalog):
        """Combo prices come from member dishes and the discount."""
        calc = CostCalculator(catalog)
        lunch = catalog.get_combo("LUNCH")

        assert calc.combo_original_price(lunch) == Decimal("90000")
        assert calc.combo_cost(lunch) == Decimal("8000")
        assert calc.combo_final_price(lunch) == Decimal("81000")
        assert lunch.final_price == Decimal("81000")


class TestRecipeExplosion:
    """Resolving order lines into ingredient demand."""

    def test_aggregates_shared_ingredients(self, catalog):
        """Demand for SALT is summed across lines in first-seen order."""
        items = [
            OrderItem(item_id="FRIEDRICE", quantity=2, unit_price=Decimal("0")),
            OrderItem(item_id="SOUP", quantity=1, unit_price=Decimal("0")),
        ]
        result = RecipeExplosionService(catalog).explode_items(items)

        assert result.as_mapping() == {"RICE": Decimal("4"), "SALT": Decimal("5")}
        assert [r.ingredient_id for r in result.requirements] == ["RICE", "SALT"]
        assert result.dish_sales == {"FRIEDRICE": 2, "SOUP": 1}

    def test_combo_expands_members(self, catalog):
        """A combo line demands each member recipe once per unit."""
        result = RecipeExplosionService(catalog).explode_menu_item(catalog.get_combo("LUNCH"), quantity=3)

        assert result.as_mapping() == {"SALT": Decimal("12"), "RICE": Decimal("6")}
        assert result.combo_sales == {"LUNCH": 3}
        assert result.dish_sales == {}

    def test_missing_combo_member_raises(self, catalog):
        """A combo pointing at a vanished dish cannot be resolved."""
        lunch = catalog.get_combo("LUNCH")
        catalog.remove(EntityKind.DISH, "FRIEDRICE")

        with pytest.raises(FulfillmentError):
            RecipeExplosionService(catalog).explode_menu_item(lunch)

    def test_check_availability_raises_first_shortfall(self, catalog):
        """The first uncovered ingredient is raised."""
        service = RecipeExplosionService(catalog)
        result = service.explode_menu_item(catalog.get_dish("SOUP"), quantity=4)

        with pytest.raises(InsufficientStockError) as exc_info:
            service.check_availability(result)

        assert exc_info.value.ingredient_name == "Salt"
        assert exc_info.value.required == Decimal("12")


class TestIsFulfillable:
    """Single-unit availability queries."""

    def test_dish_with_stock(self, catalog):
        """SOUP needs 3 SALT, 10 on hand."""
        assert RecipeExplosionService(catalog).is_fulfillable(catalog.get_dish("SOUP")) is True

    def test_dish_without_stock(self, catalog, clock):
        """After consuming 9 SALT, SOUP (3 SALT) is no longer possible."""
        builder = OrderBuilder(catalog, clock=clock)
        builder.add_dish("SOUP", 3)
        CreateOrderCommand(catalog, builder.build(), clock=clock).execute()

        service = RecipeExplosionService(catalog)
        assert service.is_fulfillable(catalog.get_dish("SOUP")) is False
        assert service.is_fulfillable(catalog.get_dish("ICETEA")) is True

    def test_combo_members_compete_for_stock(self, catalog, clock):
        """With 3 SALT, SOUP alone fits but LUNCH (SOUP + FRIEDRICE = 4 SALT) does not."""
        builder = OrderBuilder(catalog, clock=clock)
        builder.add_dish("FRIEDRICE", 7)
        CreateOrderCommand(catalog, builder.build(), clock=clock).execute()
        assert catalog.get_ingredient("SALT").quantity == Decimal("3")

        service = RecipeExplosionService(catalog)
        assert service.is_fulfillable(catalog.get_dish("SOUP")) is True
        assert service.is_fulfillable(catalog.get_combo("LUNCH")) is False

        RestockIngredientCommand(catalog, "SALT", Decimal("1")).execute()
        assert service.is_fulfillable(catalog.get_combo("LUNCH")) is True

    def test_combo_with_missing_member(self, catalog):
        """A combo whose member is gone is not fulfillable."""
        combo = Combo(id="GHOST", name="Ghost", dish_ids=["NOPE"])
        assert RecipeExplosionService(catalog).is_fulfillable(combo) is False
