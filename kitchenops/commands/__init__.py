"""
Reversible catalog commands.
"""
from kitchenops.commands.base import CatalogCommand, Command
from kitchenops.commands.batch import BatchCommand
from kitchenops.commands.combo import AddComboCommand, DeleteComboCommand, UpdateComboCommand
from kitchenops.commands.dish import (
    AddDishCommand,
    BatchAddDishesCommand,
    BatchDeleteDishesCommand,
    BatchUpdateDishesCommand,
    DeleteDishCommand,
    UpdateDishCommand,
    dish_availability_update,
    dish_price_adjustment,
)
from kitchenops.commands.ingredient import (
    AddIngredientCommand,
    AdjustIngredientPricesCommand,
    AdjustIngredientQuantitiesCommand,
    BatchAddIngredientsCommand,
    BatchDeleteIngredientsCommand,
    BatchUpdateIngredientsCommand,
    DeleteIngredientCommand,
    RestockIngredientCommand,
    UpdateIngredientCommand,
)
from kitchenops.commands.order import CancelOrderCommand, CreateOrderCommand, SetOrderStatusCommand

__all__ = [
    "Command",
    "CatalogCommand",
    "BatchCommand",
    "AddIngredientCommand",
    "UpdateIngredientCommand",
    "DeleteIngredientCommand",
    "BatchAddIngredientsCommand",
    "BatchUpdateIngredientsCommand",
    "BatchDeleteIngredientsCommand",
    "RestockIngredientCommand",
    "AdjustIngredientPricesCommand",
    "AdjustIngredientQuantitiesCommand",
    "AddDishCommand",
    "UpdateDishCommand",
    "DeleteDishCommand",
    "BatchAddDishesCommand",
    "BatchUpdateDishesCommand",
    "BatchDeleteDishesCommand",
    "dish_price_adjustment",
    "dish_availability_update",
    "AddComboCommand",
    "UpdateComboCommand",
    "DeleteComboCommand",
    "CreateOrderCommand",
    "SetOrderStatusCommand",
    "CancelOrderCommand",
]
