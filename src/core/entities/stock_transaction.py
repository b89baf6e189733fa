"""Stock ledger entities."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class TransactionType(str, Enum):
    """Kinds of stock movement recorded in the ledger."""

    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    REPARATION_USE = "reparation_use"
    REPARATION_RETURN = "reparation_return"
    DAMAGE = "damage"
    RETURN_TO_SUPPLIER = "return_to_supplier"

    @property
    def is_additive(self) -> bool:
        return self in ADDITIVE_TYPES

    def signed(self, magnitude: int) -> int:
        """Quantity delta this movement type applies for a given magnitude."""
        return magnitude if self.is_additive else -magnitude


ADDITIVE_TYPES = frozenset(
    {
        TransactionType.PURCHASE,
        TransactionType.ADJUSTMENT,
        TransactionType.REPARATION_RETURN,
    }
)

# Types an operator may record by hand; the rest come from workflows.
MANUAL_TYPES = frozenset(
    {
        TransactionType.PURCHASE,
        TransactionType.ADJUSTMENT,
        TransactionType.DAMAGE,
        TransactionType.RETURN_TO_SUPPLIER,
    }
)


class StockTransaction(BaseModel):
    """Immutable record of one quantity change."""

    id: int | None = None
    item_id: int
    type: TransactionType
    quantity: int = Field(..., gt=0)  # magnitude, always positive
    quantity_before: int
    quantity_after: int
    unit_price: float = 0.0
    total_amount: float = 0.0
    reparation_id: int | None = None
    supplier_id: int | None = None
    reference: str = ""
    notes: str = ""
    created_by: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def check_balance(self) -> "StockTransaction":
        """Enforce after = before ± quantity and derive the total."""
        expected = self.quantity_before + self.type.signed(self.quantity)
        if self.quantity_after != expected:
            raise ValueError(
                f"{self.type.value} of {self.quantity} from {self.quantity_before} "
                f"must end at {expected}, not {self.quantity_after}"
            )
        self.total_amount = self.unit_price * self.quantity
        return self


@dataclass
class MovementContext:
    """Who, why and at what price a movement happens."""

    unit_price: float | None = None
    reference: str = ""
    notes: str = ""
    created_by: str | None = None
    reparation_id: int | None = None
    supplier_id: int | None = None


@dataclass
class TransactionFilter:
    """Ledger query filters; ``None`` means unfiltered."""

    item_id: int | None = None
    type: TransactionType | None = None
    reparation_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class TransactionStats(BaseModel):
    """Ledger totals for one transaction type."""

    type: TransactionType
    count: int
    total_quantity: int
    total_amount: float
