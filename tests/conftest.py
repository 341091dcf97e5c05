"""
Test configuration and fixtures.
"""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytz

from kitchenops.commands import (
    AddComboCommand,
    BatchAddDishesCommand,
    BatchAddIngredientsCommand,
)
from kitchenops.db.store import CatalogStore
from kitchenops.models import Combo, Dish, Ingredient
from kitchenops.services.audit import AuditTrail
from kitchenops.services.history import HistoryManager


class FakeClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 2, 12, 0, 0, tzinfo=pytz.UTC)):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> CatalogStore:
    """An empty catalog store."""
    return CatalogStore()


@pytest.fixture
def catalog(clock: FakeClock) -> CatalogStore:
    """
    A small restaurant catalog.

    Ingredients: SALT 10 (min 2, 1000/unit), RICE 20 kg (min 5, 2000/kg),
    BEEF 5 kg (min 1, 100000/kg), TEA 3 (min 1, 500/unit).
    Dishes: SOUP (3 SALT), FRIEDRICE (2 RICE + 1 SALT),
    STEAK (0.5 BEEF + 0.5 SALT), ICETEA (1 TEA).
    Combo: LUNCH = SOUP + FRIEDRICE at 10% off.
    """
    store = CatalogStore()
    stamp = datetime(2024, 1, 1, 9, 0, 0, tzinfo=pytz.UTC)
    BatchAddIngredientsCommand(store, [
        Ingredient(id="SALT", name="Salt", unit="pcs", quantity=Decimal("10"),
                   min_quantity=Decimal("2"), price_per_unit=Decimal("1000"), last_updated=stamp),
        Ingredient(id="RICE", name="Rice", unit="kg", quantity=Decimal("20"),
                   min_quantity=Decimal("5"), price_per_unit=Decimal("2000"), last_updated=stamp),
        Ingredient(id="BEEF", name="Beef", unit="kg", quantity=Decimal("5"),
                   min_quantity=Decimal("1"), price_per_unit=Decimal("100000"), last_updated=stamp),
        Ingredient(id="TEA", name="Tea", unit="pcs", quantity=Decimal("3"),
                   min_quantity=Decimal("1"), price_per_unit=Decimal("500"), last_updated=stamp),
    ]).execute()
    BatchAddDishesCommand(store, [
        Dish(id="SOUP", name="Salt Soup", price=Decimal("50000"), category="Soup",
             ingredients={"SALT": Decimal("3")}),
        Dish(id="FRIEDRICE", name="Fried Rice", price=Decimal("40000"), category="Rice",
             ingredients={"RICE": Decimal("2"), "SALT": Decimal("1")}),
        Dish(id="STEAK", name="Steak", price=Decimal("150000"), category="Main",
             ingredients={"BEEF": Decimal("0.5"), "SALT": Decimal("0.5")}),
        Dish(id="ICETEA", name="Iced Tea", price=Decimal("10000"), category="Drinks",
             ingredients={"TEA": Decimal("1")}),
    ]).execute()
    AddComboCommand(store, Combo(
        id="LUNCH", name="Lunch Set", dish_ids=["SOUP", "FRIEDRICE"],
        discount_percent=Decimal("10"), created_date=stamp,
    )).execute()
    return store


@pytest.fixture
def trail() -> AuditTrail:
    return AuditTrail(username="staff1")


@pytest.fixture
def history(trail: AuditTrail) -> HistoryManager:
    """History with its own clock, so audit stamps never advance the command clock."""
    return HistoryManager(capacity=10, sinks=[trail], clock=FakeClock())
