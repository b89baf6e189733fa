"""Abstract interface for the append-only stock ledger."""

from abc import ABC, abstractmethod

from src.core.entities.pagination import Page, PageRequest
from src.core.entities.stock_transaction import (
    StockTransaction,
    TransactionFilter,
    TransactionStats,
)


class ILedgerStore(ABC):
    """Read side of the stock ledger.

    Entries are written only by ``IItemStore.apply_movement``; there is no
    update or delete.
    """

    @abstractmethod
    async def get_transaction(self, transaction_id: int) -> StockTransaction | None:
        """Get a ledger entry by ID."""
        pass

    @abstractmethod
    async def list_transactions(
        self, filters: TransactionFilter, page: PageRequest
    ) -> Page[StockTransaction]:
        """List ledger entries with filtering, sorting and pagination."""
        pass

    @abstractmethod
    async def get_stats(self) -> list[TransactionStats]:
        """Count, quantity and amount totals grouped by type."""
        pass

    @abstractmethod
    async def count_for_item(self, item_id: int) -> int:
        """Number of ledger entries referencing an item."""
        pass
