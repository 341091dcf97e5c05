"""
Ingredient model for stock tracking and costing.
"""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from kitchenops.core.clock import now


class Ingredient(BaseModel):
    """An ingredient kept in stock and used by dish recipes."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(min_length=1)
    name: str
    unit: str  # kg, g, l, units
    quantity: Decimal = Field(ge=0)
    min_quantity: Decimal = Field(default=Decimal(0), ge=0)
    price_per_unit: Decimal = Field(default=Decimal(0), ge=0)
    last_updated: datetime = Field(default_factory=now)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_quantity

    def snapshot(self) -> "Ingredient":
        return self.model_copy(deep=True)
