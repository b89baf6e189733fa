"""
Stock mutation service.

The single choke point through which an item's quantity changes. Each
movement is validated here, then handed to the item store which applies
the quantity change, re-derives the stock status and appends the ledger
entry in one transaction.
"""

import asyncio
import weakref
from dataclasses import dataclass

from src.config import get_logger
from src.core.entities.item import Item
from src.core.entities.stock_transaction import (
    MANUAL_TYPES,
    MovementContext,
    StockTransaction,
    TransactionType,
)
from src.core.exceptions import (
    InsufficientStockError,
    InvalidArgumentError,
    ItemNotFoundError,
)
from src.core.interfaces.item_store import IItemStore
from src.core.validators import parse_enum, require_positive_int

logger = get_logger(__name__)


@dataclass
class MovementResult:
    """Item snapshot after the movement plus the ledger entry it produced."""

    item: Item
    transaction: StockTransaction


class StockMutationService:
    """
    Applies stock movements one item at a time.

    Movements against the same item are serialised in-process with a
    per-item lock; the store's conditional update guards against writers
    outside this process.
    """

    def __init__(self, item_store: IItemStore) -> None:
        self._item_store = item_store
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, item_id: int) -> asyncio.Lock:
        lock = self._locks.get(item_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[item_id] = lock
        return lock

    async def apply_movement(
        self,
        item_id: int,
        transaction_type: TransactionType | str,
        magnitude: int,
        context: MovementContext | None = None,
    ) -> MovementResult:
        """
        Change an item's quantity by ``magnitude`` in the direction of its type.

        Args:
            item_id: Item to move.
            transaction_type: Movement type; additive or subtractive.
            magnitude: Unsigned quantity, > 0.
            context: Price override, reference, notes, actor, linked records.

        Returns:
            MovementResult with the updated item and the new ledger entry.

        Raises:
            InvalidArgumentError: unknown type or non-positive magnitude.
            ItemNotFoundError: item does not exist.
            InsufficientStockError: subtractive movement exceeds quantity.
        """
        transaction_type = parse_enum(TransactionType, transaction_type, "type")
        magnitude = require_positive_int(magnitude, "quantity")
        context = context or MovementContext()

        async with self._lock_for(item_id):
            item = await self._item_store.get_item(item_id)
            if item is None:
                raise ItemNotFoundError(item_id)

            if not transaction_type.is_additive and item.quantity < magnitude:
                raise InsufficientStockError(
                    item_id=item_id,
                    requested=magnitude,
                    available=item.quantity,
                    item_name=item.name,
                )

            unit_price = context.unit_price
            if unit_price is None:
                unit_price = (
                    item.buy_price
                    if transaction_type == TransactionType.PURCHASE
                    else item.sell_price
                )

            updated, transaction = await self._item_store.apply_movement(
                item_id,
                transaction_type,
                magnitude,
                unit_price,
                context,
            )

        logger.info(
            "stock_movement_applied",
            item_id=item_id,
            type=transaction_type.value,
            quantity=magnitude,
            before=transaction.quantity_before,
            after=transaction.quantity_after,
            status=updated.status.value,
            reparation_id=context.reparation_id,
        )
        return MovementResult(item=updated, transaction=transaction)

    async def record_manual_movement(
        self,
        item_id: int,
        transaction_type: TransactionType | str,
        magnitude: int,
        context: MovementContext | None = None,
    ) -> MovementResult:
        """Operator-entered movement; workflow-only types are refused."""
        transaction_type = parse_enum(TransactionType, transaction_type, "type")
        if transaction_type not in MANUAL_TYPES:
            allowed = ", ".join(sorted(t.value for t in MANUAL_TYPES))
            raise InvalidArgumentError(
                "type",
                f"invalid transaction type for manual entry; use one of: {allowed}",
                transaction_type.value,
            )
        return await self.apply_movement(item_id, transaction_type, magnitude, context)
