"""
Menu models: dishes and combos.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kitchenops.core.clock import now


class Dish(BaseModel):
    """
    A sellable dish with its recipe.

    ``ingredients`` maps ingredient id to the quantity used per serving.
    ``cost`` is a cache of the recipe cost, refreshed by the commands that
    install the dish or reprice its ingredients.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    price: Decimal = Field(ge=0)
    category: str = ""
    is_available: bool = True
    ingredients: Dict[str, Decimal] = Field(default_factory=dict)
    cost: Decimal = Decimal(0)
    sales_count: int = Field(default=0, ge=0)

    @field_validator("ingredients")
    @classmethod
    def quantities_positive(cls, v):
        for ingredient_id, qty in v.items():
            if qty <= 0:
                raise ValueError(f"quantity for ingredient '{ingredient_id}' must be positive")
        return v

    def snapshot(self) -> "Dish":
        return self.model_copy(deep=True)


class Combo(BaseModel):
    """A discounted bundle of dishes."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    dish_ids: List[str] = Field(default_factory=list)
    discount_percent: Decimal = Field(default=Decimal(0), ge=0, le=100)
    original_price: Decimal = Decimal(0)  # sum of member dish prices (cached)
    cost: Decimal = Decimal(0)  # sum of member dish costs (cached)
    created_date: datetime = Field(default_factory=now)
    sales_count: int = Field(default=0, ge=0)
    is_active: bool = True

    @field_validator("dish_ids")
    @classmethod
    def dish_ids_unique(cls, v):
        if len(set(v)) != len(v):
            raise ValueError("dish_ids must not contain duplicates")
        return v

    @property
    def final_price(self) -> Decimal:
        return self.original_price * (1 - self.discount_percent / 100)

    def snapshot(self) -> "Combo":
        return self.model_copy(deep=True)
