"""Tests for SQLiteItemStore against a migrated database."""

import asyncio

import aiosqlite
import pytest

from src.core.entities.item import Item, ItemFilter, StockStatus
from src.core.entities.pagination import PageRequest
from src.core.entities.stock_transaction import MovementContext, TransactionType
from src.core.exceptions import (
    DuplicateItemCodeError,
    InsufficientStockError,
    InvalidArgumentError,
    ItemNotFoundError,
)
from src.infrastructure.storage.sqlite import (
    SQLiteItemStore,
    SQLiteLedgerStore,
    get_connection,
)


@pytest.fixture
def store(sqlite_db) -> SQLiteItemStore:
    return SQLiteItemStore()


@pytest.fixture
def ledger(sqlite_db) -> SQLiteLedgerStore:
    return SQLiteLedgerStore()


class TestItemCrud:
    async def test_create_generates_code(self, store):
        item = await store.create_item(Item(name="brake disc", sell_price=30.0))

        assert item.id is not None
        assert item.item_code.startswith("ITEM-BRA-")
        fetched = await store.get_item(item.id)
        assert fetched.name == "brake disc"
        assert fetched.status == StockStatus.OUT_OF_STOCK

    async def test_duplicate_code(self, store):
        await store.create_item(Item(name="Disc", item_code="DISC-1"))
        with pytest.raises(DuplicateItemCodeError):
            await store.create_item(Item(name="Other disc", item_code="DISC-1"))

    async def test_generated_code_clash_is_redrawn(self, store, monkeypatch):
        draws = iter([7, 7, 8])
        monkeypatch.setattr(
            "src.core.entities.item.random.randint", lambda a, b: next(draws)
        )

        first = await store.create_item(Item(name="Brake pads"))
        second = await store.create_item(Item(name="Brake disc"))

        assert first.item_code == "ITEM-BRA-000007"
        assert second.item_code == "ITEM-BRA-000008"
        assert (await store.get_item(second.id)).item_code == "ITEM-BRA-000008"

    async def test_generated_code_gives_up_after_attempts(self, store, monkeypatch):
        monkeypatch.setattr("src.core.entities.item.random.randint", lambda a, b: 7)
        await store.create_item(Item(name="Brake pads"))

        with pytest.raises(DuplicateItemCodeError):
            await store.create_item(Item(name="Brake disc"))

        page = await store.list_items(ItemFilter(), PageRequest())
        assert page.total == 1

    async def test_update_keeps_stored_quantity(self, store):
        item = await store.create_item(Item(name="Disc", quantity=7, threshold=5))
        item.quantity = 999
        item.threshold = 10
        item.location = "A1"

        updated = await store.update_item(item)

        assert updated.quantity == 7
        assert updated.status == StockStatus.LOW_STOCK
        fetched = await store.get_item(item.id)
        assert fetched.quantity == 7
        assert fetched.location == "A1"

    async def test_update_missing(self, store):
        with pytest.raises(ItemNotFoundError):
            await store.update_item(Item(id=404, name="Ghost"))

    async def test_delete(self, store):
        item = await store.create_item(Item(name="Disc"))
        assert await store.delete_item(item.id) is True
        assert await store.get_item(item.id) is None
        assert await store.delete_item(item.id) is False

    async def test_list_filters_and_pages(self, store):
        await store.create_item(Item(name="Brake pad", quantity=20))
        await store.create_item(Item(name="Brake disc", quantity=2))
        await store.create_item(Item(name="Air filter", quantity=0))

        page = await store.list_items(
            ItemFilter(search="Brake"), PageRequest(page=1, limit=1, sort="name")
        )
        assert page.total == 2
        assert page.pages == 2
        assert [i.name for i in page.items] == ["Brake disc"]

        low = await store.list_items(
            ItemFilter(status=StockStatus.LOW_STOCK), PageRequest(sort="name")
        )
        assert [i.name for i in low.items] == ["Brake disc"]

    async def test_unknown_sort_rejected(self, store):
        with pytest.raises(InvalidArgumentError):
            await store.list_items(ItemFilter(), PageRequest(sort="-password"))


class TestApplyMovement:
    async def test_movement_writes_item_and_ledger(self, store, ledger):
        item = await store.create_item(Item(name="Oil", threshold=5))

        updated, tx = await store.apply_movement(
            item.id,
            TransactionType.PURCHASE,
            8,
            4.5,
            MovementContext(reference="PO-1", created_by="admin-1"),
        )

        assert updated.quantity == 8
        assert updated.status == StockStatus.AVAILABLE
        assert tx.id is not None
        assert (tx.quantity_before, tx.quantity_after) == (0, 8)
        stored = await ledger.get_transaction(tx.id)
        assert stored.total_amount == 36.0
        assert stored.reference == "PO-1"
        assert (await store.get_item(item.id)).status == StockStatus.AVAILABLE

    async def test_insufficient_stock_leaves_no_trace(self, store, ledger):
        item = await store.create_item(Item(name="Oil"))
        await store.apply_movement(item.id, TransactionType.PURCHASE, 2, 1.0, MovementContext())

        with pytest.raises(InsufficientStockError) as exc_info:
            await store.apply_movement(
                item.id, TransactionType.REPARATION_USE, 3, 1.0, MovementContext()
            )

        assert exc_info.value.available == 2
        assert (await store.get_item(item.id)).quantity == 2
        assert await ledger.count_for_item(item.id) == 1

    async def test_unknown_item(self, store):
        with pytest.raises(ItemNotFoundError):
            await store.apply_movement(404, TransactionType.PURCHASE, 1, 0.0, MovementContext())

    async def test_racing_drains_are_serialized(self, store, ledger):
        item = await store.create_item(Item(name="Oil"))
        await store.apply_movement(item.id, TransactionType.PURCHASE, 5, 1.0, MovementContext())

        results = await asyncio.gather(
            *[
                store.apply_movement(item.id, TransactionType.SALE, 2, 1.0, MovementContext())
                for _ in range(4)
            ],
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, InsufficientStockError)) == 2
        assert (await store.get_item(item.id)).quantity == 1
        assert await ledger.count_for_item(item.id) == 3


class TestLedgerAppendOnly:
    async def test_update_rejected(self, store):
        item = await store.create_item(Item(name="Oil"))
        _, tx = await store.apply_movement(
            item.id, TransactionType.PURCHASE, 1, 1.0, MovementContext()
        )

        async with get_connection() as conn:
            with pytest.raises(aiosqlite.Error, match="append-only"):
                await conn.execute(
                    "UPDATE stock_transactions SET quantity = 50 WHERE id = ?", (tx.id,)
                )

    async def test_delete_rejected(self, store):
        item = await store.create_item(Item(name="Oil"))
        _, tx = await store.apply_movement(
            item.id, TransactionType.PURCHASE, 1, 1.0, MovementContext()
        )

        async with get_connection() as conn:
            with pytest.raises(aiosqlite.Error, match="append-only"):
                await conn.execute("DELETE FROM stock_transactions WHERE id = ?", (tx.id,))
