"""
Catalog entities.
"""
from kitchenops.models.ingredient import Ingredient
from kitchenops.models.menu import Combo, Dish
from kitchenops.models.order import Order, OrderItem, OrderStatus

__all__ = [
    "Ingredient",
    "Dish",
    "Combo",
    "Order",
    "OrderItem",
    "OrderStatus",
]
