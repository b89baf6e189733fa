"""Inventory item entity and stock status derivation."""

import random
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

DEFAULT_THRESHOLD = 5


class StockStatus(str, Enum):
    """Stock level of an item relative to its threshold."""

    AVAILABLE = "available"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


def derive_status(quantity: int, threshold: int) -> StockStatus:
    """Map (quantity, threshold) to a stock status.

    The low-stock band is inclusive: a quantity equal to the threshold is
    already low.
    """
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.AVAILABLE


def generate_item_code(name: str) -> str:
    """Build an item code like ``ITEM-BRA-482913`` from the item name."""
    prefix = (name.strip()[:3] or "XXX").upper()
    return f"ITEM-{prefix}-{random.randint(0, 999999):06d}"


class Item(BaseModel):
    """A stocked part or product."""

    id: int | None = None
    name: str
    description: str | None = None
    quantity: int = Field(default=0, ge=0)
    buy_price: float = Field(default=0.0, ge=0)
    sell_price: float = Field(default=0.0, ge=0)
    category_id: int | None = None
    supplier_id: int | None = None
    threshold: int = Field(default=DEFAULT_THRESHOLD, ge=0)
    status: StockStatus = StockStatus.OUT_OF_STOCK
    item_code: str | None = None
    location: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def sync_status(self) -> "Item":
        """Keep status consistent with quantity and threshold."""
        self.status = derive_status(self.quantity, self.threshold)
        return self

    def refresh_status(self) -> StockStatus:
        """Re-derive status after an in-place quantity or threshold change."""
        self.status = derive_status(self.quantity, self.threshold)
        return self.status

    @property
    def profit_margin(self) -> float:
        return self.sell_price - self.buy_price

    @property
    def profit_margin_percent(self) -> float:
        if self.buy_price <= 0:
            return 0.0
        return round((self.sell_price - self.buy_price) / self.buy_price * 100, 2)


@dataclass
class ItemFilter:
    """Item query filters; ``None`` means unfiltered."""

    category_id: int | None = None
    supplier_id: int | None = None
    status: StockStatus | None = None
    search: str | None = None
