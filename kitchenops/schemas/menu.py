"""
Request models for changing dishes and combos.
"""
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel


class DishUpdate(BaseModel):
    """Fields to change on a dish; unset fields are left alone."""
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    category: Optional[str] = None
    is_available: Optional[bool] = None
    # Replaces the whole recipe when given
    ingredients: Optional[Dict[str, Decimal]] = None


class ComboUpdate(BaseModel):
    """Fields to change on a combo; unset fields are left alone."""
    name: Optional[str] = None
    description: Optional[str] = None
    dish_ids: Optional[List[str]] = None
    discount_percent: Optional[Decimal] = None
    is_active: Optional[bool] = None
