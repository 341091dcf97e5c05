"""
Error taxonomy for catalog commands and order fulfillment.

ValidationError is raised while a command is being built, before anything
is mutated. FulfillmentError is raised from ``execute()`` by the check phase
of a command, also before anything is mutated.
"""
from decimal import Decimal
from typing import Optional

from pydantic import ValidationError as PydanticValidationError


class KitchenOpsError(Exception):
    """Base class for all kitchenops errors."""


class ValidationError(KitchenOpsError, ValueError):
    """A command could not be constructed from the given input."""

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        parts = []
        for error in exc.errors():
            location = ".".join(str(p) for p in error.get("loc", ())) or "value"
            parts.append(f"{location}: {error.get('msg')}")
        return cls("; ".join(parts))


class NotFoundError(ValidationError):
    """A referenced entity does not exist in the catalog."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} '{entity_id}' not found")


class InvalidTransitionError(ValidationError):
    """An order status change that the lifecycle does not allow."""

    def __init__(self, order_id: str, current: str, requested: str):
        self.order_id = order_id
        self.current = current
        self.requested = requested
        super().__init__(f"Order '{order_id}' cannot move from {current} to {requested}")


class FulfillmentError(KitchenOpsError):
    """A command failed its check phase; the store was not modified."""


class InsufficientStockError(FulfillmentError):
    """An ingredient cannot cover the resolved requirement of an order."""

    def __init__(
        self,
        ingredient_id: str,
        required: Decimal,
        available: Decimal,
        ingredient_name: Optional[str] = None,
    ):
        self.ingredient_id = ingredient_id
        self.ingredient_name = ingredient_name
        self.required = required
        self.available = available
        label = ingredient_name or ingredient_id
        super().__init__(
            f"Insufficient stock for '{label}': required {required}, "
            f"available {available} (short {self.shortfall})"
        )

    @property
    def shortfall(self) -> Decimal:
        return self.required - self.available
