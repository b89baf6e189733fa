"""Tests for StockMutationService."""

import asyncio

import pytest

from src.core.entities.item import StockStatus
from src.core.entities.stock_transaction import MovementContext, TransactionType
from src.core.exceptions import (
    InsufficientStockError,
    InvalidArgumentError,
    ItemNotFoundError,
)
from src.core.services.stock_mutation import StockMutationService


class TestApplyMovement:
    """Tests for apply_movement."""

    async def test_purchase_increases_quantity(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=2, threshold=5, buy_price=4.0)

        result = await stock.apply_movement(item.id, TransactionType.PURCHASE, 10)

        assert result.item.quantity == 12
        assert result.item.status == StockStatus.AVAILABLE
        assert result.transaction.quantity_before == 2
        assert result.transaction.quantity_after == 12
        assert result.transaction.unit_price == 4.0
        assert result.transaction.total_amount == 40.0

    async def test_subtractive_defaults_to_sell_price(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=5, buy_price=4.0, sell_price=7.0)

        result = await stock.apply_movement(item.id, TransactionType.DAMAGE, 1)

        assert result.transaction.unit_price == 7.0
        assert result.item.quantity == 4

    async def test_explicit_unit_price_wins(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=5, buy_price=4.0)

        result = await stock.apply_movement(
            item.id,
            TransactionType.PURCHASE,
            1,
            MovementContext(unit_price=3.5, reference="PO-7", created_by="user-1"),
        )

        assert result.transaction.unit_price == 3.5
        assert result.transaction.reference == "PO-7"
        assert result.transaction.created_by == "user-1"

    async def test_string_type_accepted(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=0)
        result = await stock.apply_movement(item.id, "adjustment", 3)
        assert result.transaction.type == TransactionType.ADJUSTMENT

    async def test_exact_drain_to_zero(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=4)

        result = await stock.apply_movement(item.id, TransactionType.REPARATION_USE, 4)

        assert result.item.quantity == 0
        assert result.item.status == StockStatus.OUT_OF_STOCK

    async def test_status_crosses_threshold(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=6, threshold=5)

        result = await stock.apply_movement(item.id, TransactionType.SALE, 1)

        assert result.item.quantity == 5
        assert result.item.status == StockStatus.LOW_STOCK

    async def test_insufficient_stock_changes_nothing(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=3)

        with pytest.raises(InsufficientStockError) as exc_info:
            await stock.apply_movement(item.id, TransactionType.SALE, 4)

        assert exc_info.value.available == 3
        assert exc_info.value.requested == 4
        assert item_store.items[item.id].quantity == 3
        assert item_store.ledger == []

    async def test_unknown_item(self, stock):
        with pytest.raises(ItemNotFoundError):
            await stock.apply_movement(999, TransactionType.PURCHASE, 1)

    @pytest.mark.parametrize("magnitude", [0, -2])
    async def test_non_positive_magnitude(self, item_store, stock, magnitude):
        item = item_store.add(name="Oil filter", quantity=3)

        with pytest.raises(InvalidArgumentError):
            await stock.apply_movement(item.id, TransactionType.PURCHASE, magnitude)

        assert item_store.ledger == []

    async def test_unknown_type(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=3)

        with pytest.raises(InvalidArgumentError):
            await stock.apply_movement(item.id, "theft", 1)

    async def test_store_guard_catches_stale_read(self, item_store, stock):
        """The store refuses a drain even when the service saw enough stock."""
        item = item_store.add(name="Oil filter", quantity=10)
        stale = item_store.items[item.id].model_copy(deep=True)
        item_store.set_quantity(item.id, 1)

        async def stale_get(item_id):
            return stale

        item_store.get_item = stale_get

        with pytest.raises(InsufficientStockError):
            await stock.apply_movement(item.id, TransactionType.SALE, 5)

        assert item_store.items[item.id].quantity == 1
        assert item_store.ledger == []

    async def test_concurrent_drains_never_go_negative(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=5)

        results = await asyncio.gather(
            *[
                stock.apply_movement(item.id, TransactionType.SALE, 2)
                for _ in range(4)
            ],
            return_exceptions=True,
        )

        succeeded = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, InsufficientStockError)]
        assert len(succeeded) == 2
        assert len(failed) == 2
        assert item_store.items[item.id].quantity == 1

    async def test_ledger_sums_to_quantity(self, item_store, stock):
        item = item_store.add(name="Oil filter", quantity=0)

        await stock.apply_movement(item.id, TransactionType.PURCHASE, 10)
        await stock.apply_movement(item.id, TransactionType.REPARATION_USE, 3)
        await stock.apply_movement(item.id, TransactionType.REPARATION_RETURN, 1)
        await stock.apply_movement(item.id, TransactionType.DAMAGE, 2)

        ledger = item_store.ledger_for(item.id)
        assert sum(tx.type.signed(tx.quantity) for tx in ledger) == 6
        assert item_store.items[item.id].quantity == 6
        for previous, current in zip(ledger, ledger[1:]):
            assert current.quantity_before == previous.quantity_after


class TestRecordManualMovement:
    """Tests for record_manual_movement."""

    @pytest.mark.parametrize(
        "tx_type", ["purchase", "adjustment", "damage", "return_to_supplier"]
    )
    async def test_manual_types_accepted(self, item_store, stock, tx_type):
        item = item_store.add(name="Oil filter", quantity=5)
        result = await stock.record_manual_movement(item.id, tx_type, 1)
        assert result.transaction.type.value == tx_type

    @pytest.mark.parametrize("tx_type", ["reparation_use", "reparation_return", "sale"])
    async def test_workflow_types_rejected(self, item_store, stock, tx_type):
        item = item_store.add(name="Oil filter", quantity=5)

        with pytest.raises(InvalidArgumentError, match="manual entry"):
            await stock.record_manual_movement(item.id, tx_type, 1)

        assert item_store.ledger == []


def test_lock_is_shared_per_item(item_store):
    service = StockMutationService(item_store)
    lock = service._lock_for(1)
    assert service._lock_for(1) is lock
    assert service._lock_for(2) is not lock
