"""
Order models.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from kitchenops.core.clock import now


class OrderStatus(str, Enum):
    """Lifecycle of an order."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OrderItem(BaseModel):
    """A single order line; price and name are captured when ordered."""
    model_config = ConfigDict(frozen=True)

    item_id: str
    is_combo: bool = False
    name: str = ""
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(ge=0)

    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """A customer order."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(min_length=1)
    customer_name: str = ""
    staff_username: str = ""
    items: List[OrderItem] = Field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    order_date: datetime = Field(default_factory=now)
    completed_date: Optional[datetime] = None
    discount_amount: Decimal = Field(default=Decimal(0), ge=0)
    # Ingredient id -> quantity deducted when the order was fulfilled
    ingredient_usage: Dict[str, Decimal] = Field(default_factory=dict)

    @model_validator(mode="after")
    def discount_within_total(self):
        if self.discount_amount > self.total_amount:
            raise ValueError("discount_amount cannot exceed the order total")
        return self

    @property
    def total_amount(self) -> Decimal:
        return sum((item.total_price for item in self.items), Decimal(0))

    @property
    def final_amount(self) -> Decimal:
        return self.total_amount - self.discount_amount

    def snapshot(self) -> "Order":
        return self.model_copy(deep=True)
