"""
Seed a demo catalog through the command history.

Usage: python -m kitchenops.scripts.seed_demo
"""
import random
from decimal import Decimal
from typing import Optional

from kitchenops.commands import (
    AddComboCommand,
    BatchAddDishesCommand,
    BatchAddIngredientsCommand,
)
from kitchenops.core.config import get_settings
from kitchenops.core.log_config import configure_logging
from kitchenops.db.store import CatalogStore
from kitchenops.models import Combo, Dish, Ingredient
from kitchenops.services.history import HistoryManager

INGREDIENT_NAMES = [
    "Beef", "Pork", "Chicken", "Shrimp", "Salmon", "Squid", "Mackerel", "Carp", "Tofu", "Egg",
    "Lettuce", "Tomato", "Onion", "Garlic", "Ginger", "Scallion", "Coriander", "Basil", "Mint", "Spinach",
    "Cabbage", "Carrot", "Potato", "Sweet Potato", "Pumpkin", "Mushroom", "Green Beans", "Peas",
    "Rice", "Spaghetti", "Rice Noodles", "Glass Noodles", "Baguette", "Rice Paper", "Fish Sauce", "Salt",
]
UNITS = ["kg", "g", "l", "ml", "pcs", "bunch", "pack"]
DISH_STYLES = ["Pho", "Noodle Soup", "Rice", "Noodles", "Salad", "Spring Rolls", "Hotpot", "Grilled", "Stir-fried", "Steamed"]
DISH_FLAVOURS = ["beef", "chicken", "pork", "shrimp", "fish", "squid", "seafood", "vegetarian", "special", "classic"]
CATEGORIES = ["Appetizer", "Main", "Soup", "Noodles", "Rice", "Drinks", "Dessert"]


def seed_demo_catalog(
    store: CatalogStore,
    history: HistoryManager,
    ingredient_count: int = 50,
    dish_count: int = 100,
    seed: Optional[int] = 42,
) -> None:
    """Add sample ingredients, dishes and one combo as three undoable steps."""
    rng = random.Random(seed)

    ingredients = []
    for i in range(1, ingredient_count + 1):
        quantity = Decimal(rng.randint(1, 99))
        ingredients.append(Ingredient(
            id=f"ING{i:03d}",
            name=f"{rng.choice(INGREDIENT_NAMES)} {i % 10 + 1}",
            unit=rng.choice(UNITS),
            quantity=quantity,
            min_quantity=quantity * Decimal("0.2"),
            price_per_unit=Decimal(rng.randint(1000, 50000)),
        ))
    history.execute_command(BatchAddIngredientsCommand(store, ingredients))

    dishes = []
    for i in range(1, dish_count + 1):
        name = f"{rng.choice(DISH_STYLES)} {rng.choice(DISH_FLAVOURS)} {i % 20 + 1}"
        recipe = {}
        for ingredient in rng.sample(ingredients, k=min(len(ingredients), rng.randint(2, 5))):
            # 0.1 - 0.6 per serving
            recipe[ingredient.id] = Decimal(rng.randint(10, 60)) / 100
        dishes.append(Dish(
            id=f"DISH{i:03d}",
            name=name,
            description=f"House {name.lower()}",
            price=Decimal(rng.randint(20, 300) * 1000),
            category=rng.choice(CATEGORIES),
            ingredients=recipe,
        ))
    history.execute_command(BatchAddDishesCommand(store, dishes))

    if len(dishes) >= 3:
        combo = Combo(
            id="COMBO001",
            name="Family Set",
            description="Three house favourites",
            dish_ids=[d.id for d in dishes[:3]],
            discount_percent=Decimal(10),
        )
        history.execute_command(AddComboCommand(store, combo))


def main():
    settings = get_settings()
    configure_logging(settings)

    store = CatalogStore()
    history = HistoryManager()
    seed_demo_catalog(store, history)

    print(f"{settings.APP_NAME} demo catalog:")
    print(f"  ingredients: {len(store.list_ingredients())} ({len(store.low_stock_ingredients())} low stock)")
    print(f"  dishes: {len(store.list_dishes())}")
    print(f"  combos: {len(store.list_combos())}")
    for description in history.describe_undo_history():
        print(f"  - {description}")


if __name__ == "__main__":
    main()
