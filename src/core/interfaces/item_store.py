"""Abstract interface for item storage and stock movements."""

from abc import ABC, abstractmethod

from src.core.entities.item import Item, ItemFilter
from src.core.entities.pagination import Page, PageRequest
from src.core.entities.stock_transaction import (
    MovementContext,
    StockTransaction,
    TransactionType,
)


class IItemStore(ABC):
    """Interface for item persistence.

    ``apply_movement`` is the only way to change an item's quantity.
    Implementations must make the quantity change and its ledger entry a
    single atomic unit, and must refuse a subtractive movement that would
    take the quantity below zero.
    """

    @abstractmethod
    async def create_item(self, item: Item) -> Item:
        """Create a new item (quantity is persisted as given)."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> Item | None:
        """Get item by ID."""
        pass

    @abstractmethod
    async def update_item(self, item: Item) -> Item:
        """Update descriptive fields, prices and threshold. Never quantity."""
        pass

    @abstractmethod
    async def delete_item(self, item_id: int) -> bool:
        """Delete an item. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def list_items(
        self, filters: ItemFilter, page: PageRequest
    ) -> Page[Item]:
        """List items with filtering, sorting and pagination."""
        pass

    @abstractmethod
    async def apply_movement(
        self,
        item_id: int,
        transaction_type: TransactionType,
        magnitude: int,
        unit_price: float,
        context: MovementContext,
    ) -> tuple[Item, StockTransaction]:
        """Atomically change quantity, re-derive status and append a ledger entry.

        Raises:
            ItemNotFoundError: no item with this ID
            InsufficientStockError: subtractive movement exceeds the quantity
        """
        pass
