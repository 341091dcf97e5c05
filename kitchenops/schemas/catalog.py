"""
Catalog snapshot schema handed to the persistence collaborator.
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from kitchenops.core.clock import now
from kitchenops.models import Combo, Dish, Ingredient, Order


class CatalogSnapshot(BaseModel):
    """Wholesale copy of every collection in the catalog store."""
    ingredients: List[Ingredient] = Field(default_factory=list)
    dishes: List[Dish] = Field(default_factory=list)
    combos: List[Combo] = Field(default_factory=list)
    orders: List[Order] = Field(default_factory=list)
    exported_at: datetime = Field(default_factory=now)

    @property
    def entity_count(self) -> int:
        return len(self.ingredients) + len(self.dishes) + len(self.combos) + len(self.orders)
