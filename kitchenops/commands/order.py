"""
Order commands: atomic fulfillment, status transitions and cancellation.
"""
import logging
from typing import Dict, Optional

from kitchenops.commands.base import CatalogCommand, Command
from kitchenops.core.clock import Clock, now
from kitchenops.core.errors import FulfillmentError, InvalidTransitionError, ValidationError
from kitchenops.db.store import CatalogStore, EntityKind
from kitchenops.models import Ingredient, Order, OrderStatus
from kitchenops.services.ordering import resolve_line_target
from kitchenops.services.recipe_explosion import ExplosionResult, RecipeExplosionService

logger = logging.getLogger(__name__)


# Allowed status changes. Completed and Cancelled are terminal.
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.PENDING, OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


class CreateOrderCommand(Command):
    """
    Fulfill an order: deduct ingredients, count sales, and record the order.

    Two-phase check-then-commit:
    1. Resolve the order lines into per-ingredient totals (combos expanded,
       demands summed across lines).
    2. Check every total against on-hand stock. On the first shortfall raise
       InsufficientStockError; nothing has been written yet.
    3. Commit: snapshot each touched ingredient, deduct, stamp last_updated,
       bump sales counters, insert the order.

    Undo puts back the snapshotted quantities verbatim rather than adding the
    deducted amounts, then reverses the sales counters and removes the order.
    """

    def __init__(self, store: CatalogStore, order: Order, clock: Optional[Clock] = None):
        if not order.items:
            raise ValidationError("An order must contain at least one item")
        if store.get_order(order.id) is not None:
            raise ValidationError(f"Order '{order.id}' already exists")
        for item in order.items:
            resolve_line_target(store, item.item_id, item.is_combo)

        self.store = store
        self.order = order.snapshot()
        self.clock = clock or now
        self.explosion = RecipeExplosionService(store)
        self._stock_before: Dict[str, Ingredient] = {}
        self._result: Optional[ExplosionResult] = None

    def execute(self) -> None:
        if self.store.contains(EntityKind.ORDER, self.order.id):
            raise FulfillmentError(f"Order '{self.order.id}' already exists")
        result = self.explosion.explode_items(self.order.items)
        self.explosion.check_availability(result)

        stamp = self.clock()
        stock_before: Dict[str, Ingredient] = {}
        for requirement in result.requirements:
            ingredient = self.store.require_ingredient(requirement.ingredient_id)
            stock_before.setdefault(ingredient.id, ingredient.snapshot())
            ingredient.quantity -= requirement.total_quantity
            ingredient.last_updated = stamp
            self.store.put(EntityKind.INGREDIENT, ingredient)

        for dish_id, quantity in result.dish_sales.items():
            dish = self.store.require_dish(dish_id)
            dish.sales_count += quantity
            self.store.put(EntityKind.DISH, dish)

        for combo_id, quantity in result.combo_sales.items():
            combo = self.store.require_combo(combo_id)
            combo.sales_count += quantity
            self.store.put(EntityKind.COMBO, combo)

        placed = self.order.snapshot()
        placed.ingredient_usage = result.as_mapping()
        self.store.put(EntityKind.ORDER, placed)

        self._stock_before = stock_before
        self._result = result
        logger.debug(f"Order '{placed.id}' consumed {len(result.requirements)} ingredients")

    def undo(self) -> None:
        if self._result is None:
            return

        for ingredient_id, before in self._stock_before.items():
            ingredient = self.store.get_ingredient(ingredient_id)
            if ingredient is None:
                ingredient = before
            ingredient.quantity = before.quantity
            ingredient.last_updated = before.last_updated
            self.store.put(EntityKind.INGREDIENT, ingredient)

        for dish_id, quantity in self._result.dish_sales.items():
            dish = self.store.get_dish(dish_id)
            if dish is not None:
                dish.sales_count -= quantity
                self.store.put(EntityKind.DISH, dish)

        for combo_id, quantity in self._result.combo_sales.items():
            combo = self.store.get_combo(combo_id)
            if combo is not None:
                combo.sales_count -= quantity
                self.store.put(EntityKind.COMBO, combo)

        self.store.remove(EntityKind.ORDER, self.order.id)
        self._stock_before = {}
        self._result = None

    @property
    def description(self) -> str:
        customer = self.order.customer_name or "walk-in"
        return f"Create order '{self.order.id}' for {customer} ({len(self.order.items)} lines, {self.order.final_amount})"


def _require_transition(order: Order, status: OrderStatus) -> None:
    if status not in ALLOWED_TRANSITIONS[order.status]:
        raise InvalidTransitionError(order.id, order.status.value, status.value)


class SetOrderStatusCommand(CatalogCommand):
    """
    Move an order to a new status.

    Completing an order stamps ``completed_date``. Setting Cancelled here does
    not return ingredients to stock; use CancelOrderCommand for that. The
    transition is checked when the command is built and again against the
    order's current status on every execute.
    """

    def __init__(self, store: CatalogStore, order_id: str, status: OrderStatus,
                 clock: Optional[Clock] = None):
        super().__init__(store)
        self.status = OrderStatus(status)
        _require_transition(store.require_order(order_id), self.status)
        self.order_id = order_id
        self.clock = clock or now

    def _apply(self) -> None:
        order = self.store.require_order(self.order_id)
        _require_transition(order, self.status)
        order.status = self.status
        if self.status == OrderStatus.COMPLETED:
            order.completed_date = self.clock()
        self._write(EntityKind.ORDER, order)

    @property
    def description(self) -> str:
        return f"Set order '{self.order_id}' status to {self.status.value}"


class CancelOrderCommand(CatalogCommand):
    """
    Cancel an order and return what it consumed.

    Adds back the ingredient quantities recorded on the order at fulfillment,
    reverses its sales counters and marks it Cancelled. Undo reinstalls the
    exact pre-images of every entity touched.
    """

    def __init__(self, store: CatalogStore, order_id: str, clock: Optional[Clock] = None):
        super().__init__(store)
        _require_transition(store.require_order(order_id), OrderStatus.CANCELLED)
        self.order_id = order_id
        self.clock = clock or now

    def _apply(self) -> None:
        order = self.store.require_order(self.order_id)
        _require_transition(order, OrderStatus.CANCELLED)
        stamp = self.clock()

        for ingredient_id, quantity in order.ingredient_usage.items():
            ingredient = self.store.get_ingredient(ingredient_id)
            if ingredient is None:
                logger.warning(f"Cannot return {quantity} of '{ingredient_id}' for order '{order.id}': ingredient deleted")
                continue
            ingredient.quantity += quantity
            ingredient.last_updated = stamp
            self._write(EntityKind.INGREDIENT, ingredient)

        for item in order.items:
            kind = EntityKind.COMBO if item.is_combo else EntityKind.DISH
            menu_item = self.store.get(kind, item.item_id)
            if menu_item is None:
                continue
            menu_item.sales_count = max(0, menu_item.sales_count - item.quantity)
            self._write(kind, menu_item)

        order.status = OrderStatus.CANCELLED
        self._write(EntityKind.ORDER, order)

    @property
    def description(self) -> str:
        return f"Cancel order '{self.order_id}' and return its ingredients"
