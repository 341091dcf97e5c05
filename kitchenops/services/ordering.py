"""
Order building: validates requested lines and captures their prices.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from kitchenops.core.clock import Clock, new_order_id, now
from kitchenops.core.errors import NotFoundError, ValidationError
from kitchenops.db.store import CatalogStore
from kitchenops.models import Combo, Dish, Order, OrderItem
from kitchenops.schemas.order import OrderLineRequest
from kitchenops.services.cost_calculator import CostCalculator

logger = logging.getLogger(__name__)


def resolve_line_target(store: CatalogStore, item_id: str, is_combo: bool) -> Union[Dish, Combo]:
    """
    Look up the dish or combo an order line refers to.

    Raises:
        NotFoundError: the dish/combo (or a combo member) does not exist
        ValidationError: the dish is unavailable or the combo inactive
    """
    if is_combo:
        combo = store.require_combo(item_id)
        if not combo.is_active:
            raise ValidationError(f"Combo '{item_id}' is not active")
        for dish_id in combo.dish_ids:
            if store.get_dish(dish_id) is None:
                raise NotFoundError("dish", dish_id)
        return combo

    dish = store.require_dish(item_id)
    if not dish.is_available:
        raise ValidationError(f"Dish '{item_id}' is not available")
    return dish


class OrderBuilder:
    """
    Assembles an Order from requested lines.

    Unit prices and names are captured when a line is added: the dish price,
    or the combo's final price computed from current member prices.
    """

    def __init__(self, store: CatalogStore, customer_name: str = "", staff_username: str = "",
                 clock: Optional[Clock] = None):
        self.store = store
        self.customer_name = customer_name
        self.staff_username = staff_username
        self.clock = clock or now
        self.items: List[OrderItem] = []
        self.discount_amount = Decimal(0)

    def add_line(self, line: OrderLineRequest) -> OrderItem:
        target = resolve_line_target(self.store, line.item_id, line.is_combo)
        if line.is_combo:
            unit_price = CostCalculator(self.store).combo_final_price(target)
        else:
            unit_price = target.price

        item = OrderItem(
            item_id=target.id,
            is_combo=line.is_combo,
            name=target.name,
            quantity=line.quantity,
            unit_price=unit_price,
        )
        self.items.append(item)
        logger.debug(f"Added {item.quantity} x {item.name} to order draft")
        return item

    def add_dish(self, dish_id: str, quantity: int) -> OrderItem:
        return self.add_line(self._line(dish_id, False, quantity))

    def add_combo(self, combo_id: str, quantity: int) -> OrderItem:
        return self.add_line(self._line(combo_id, True, quantity))

    def with_discount(self, amount: Decimal) -> "OrderBuilder":
        amount = Decimal(amount)
        if amount < 0:
            raise ValidationError("Discount cannot be negative")
        self.discount_amount = amount
        return self

    @property
    def total_amount(self) -> Decimal:
        return sum((item.total_price for item in self.items), Decimal(0))

    def build(self, order_id: Optional[str] = None) -> Order:
        if not self.items:
            raise ValidationError("An order must contain at least one item")

        order_id = order_id or self._unique_order_id()
        try:
            return Order(
                id=order_id,
                customer_name=self.customer_name,
                staff_username=self.staff_username,
                items=list(self.items),
                order_date=self.clock(),
                discount_amount=self.discount_amount,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e)

    def _line(self, item_id: str, is_combo: bool, quantity: int) -> OrderLineRequest:
        try:
            return OrderLineRequest(item_id=item_id, is_combo=is_combo, quantity=quantity)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e)

    def _unique_order_id(self) -> str:
        base = new_order_id(self.clock)
        candidate = base
        suffix = 1
        while self.store.get_order(candidate) is not None:
            candidate = f"{base}_{suffix}"
            suffix += 1
        return candidate
