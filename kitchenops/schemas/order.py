"""
Order line request schema.
"""
from pydantic import BaseModel, field_validator


class OrderLineRequest(BaseModel):
    """A requested order line, before prices are captured."""
    item_id: str
    is_combo: bool = False
    quantity: int

    @field_validator('quantity')
    @classmethod
    def quantity_positive(cls, v):
        if v <= 0:
            raise ValueError('quantity must be positive')
        return v
