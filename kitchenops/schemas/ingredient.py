"""
Request models for changing ingredients.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class IngredientUpdate(BaseModel):
    """Fields to change on an ingredient; unset fields are left alone."""
    name: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[Decimal] = None
    min_quantity: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
