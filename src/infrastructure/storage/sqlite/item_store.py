"""SQLite implementation of item storage and stock movements."""

from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.item import Item, ItemFilter, derive_status, generate_item_code
from src.core.entities.pagination import Page, PageRequest
from src.core.entities.stock_transaction import (
    MovementContext,
    StockTransaction,
    TransactionType,
)
from src.core.exceptions import (
    DuplicateItemCodeError,
    InsufficientStockError,
    ItemNotFoundError,
)
from src.core.interfaces.item_store import IItemStore
from src.infrastructure.storage.sqlite.base import db_operation, iso, order_by
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from src.infrastructure.storage.sqlite.ledger_store import insert_transaction

logger = get_logger(__name__)

# Draws of a generated item code before giving up on clashes
CODE_ATTEMPTS = 5

ITEM_SORT_FIELDS = frozenset(
    {
        "name",
        "item_code",
        "quantity",
        "buy_price",
        "sell_price",
        "threshold",
        "status",
        "created_at",
        "updated_at",
    }
)


class SQLiteItemStore(IItemStore):
    """SQLite implementation of item storage."""

    @db_operation("create_item")
    async def create_item(self, item: Item) -> Item:
        """
        Create a new item, generating an item code when none is set.

        A generated code that clashes with a stored one is redrawn up to
        ``CODE_ATTEMPTS`` times; a caller-supplied code is tried once.
        """
        now = datetime.utcnow()
        item.created_at = now
        item.updated_at = now
        item.refresh_status()
        generated = not item.item_code
        attempts = CODE_ATTEMPTS if generated else 1
        async with get_transaction() as conn:
            for attempt in range(1, attempts + 1):
                if generated:
                    item.item_code = generate_item_code(item.name)
                try:
                    item.id = await self._insert_item(conn, item)
                    break
                except aiosqlite.IntegrityError as e:
                    if "item_code" not in str(e):
                        raise
                    if attempt == attempts:
                        raise DuplicateItemCodeError(item.item_code) from e
                    logger.warning(
                        "item_code_collision", item_code=item.item_code, attempt=attempt
                    )
        logger.info("item_created", item_id=item.id, item_code=item.item_code)
        return item

    @staticmethod
    async def _insert_item(conn: aiosqlite.Connection, item: Item) -> int:
        cursor = await conn.execute(
            """
            INSERT INTO items (
                name, description, quantity, buy_price, sell_price,
                category_id, supplier_id, threshold, status, item_code,
                location, notes, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                item.name,
                item.description,
                item.quantity,
                item.buy_price,
                item.sell_price,
                item.category_id,
                item.supplier_id,
                item.threshold,
                item.status.value,
                item.item_code,
                item.location,
                item.notes,
                iso(item.created_at),
                iso(item.updated_at),
            ),
        )
        return cursor.lastrowid

    @db_operation("get_item")
    async def get_item(self, item_id: int) -> Item | None:
        """Get item by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
            return self._row_to_item(row) if row else None

    @db_operation("update_item")
    async def update_item(self, item: Item) -> Item:
        """Update everything but quantity; status follows the stored quantity."""
        item.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute("SELECT quantity FROM items WHERE id = ?", (item.id,))
            row = await cursor.fetchone()
            if row is None:
                raise ItemNotFoundError(item.id)
            item.quantity = row["quantity"]
            item.refresh_status()
            try:
                await conn.execute(
                    """
                    UPDATE items SET
                        name = ?, description = ?, buy_price = ?, sell_price = ?,
                        category_id = ?, supplier_id = ?, threshold = ?, status = ?,
                        item_code = ?, location = ?, notes = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        item.name,
                        item.description,
                        item.buy_price,
                        item.sell_price,
                        item.category_id,
                        item.supplier_id,
                        item.threshold,
                        item.status.value,
                        item.item_code,
                        item.location,
                        item.notes,
                        iso(item.updated_at),
                        item.id,
                    ),
                )
            except aiosqlite.IntegrityError as e:
                if "item_code" in str(e):
                    raise DuplicateItemCodeError(item.item_code) from e
                raise
        logger.info("item_updated", item_id=item.id, status=item.status.value)
        return item

    @db_operation("delete_item")
    async def delete_item(self, item_id: int) -> bool:
        """Delete an item."""
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("item_deleted", item_id=item_id)
        return deleted

    @db_operation("list_items")
    async def list_items(self, filters: ItemFilter, page: PageRequest) -> Page[Item]:
        """List items with filters, sorting and pagination."""
        clauses = []
        params: list = []
        if filters.category_id is not None:
            clauses.append("category_id = ?")
            params.append(filters.category_id)
        if filters.supplier_id is not None:
            clauses.append("supplier_id = ?")
            params.append(filters.supplier_id)
        if filters.status is not None:
            clauses.append("status = ?")
            params.append(filters.status.value)
        if filters.search:
            clauses.append("(name LIKE ? OR item_code LIKE ?)")
            params.extend([f"%{filters.search}%"] * 2)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM items {where}", params)
            total = (await cursor.fetchone())[0]
            cursor = await conn.execute(
                f"SELECT * FROM items {where} {order_by(page, ITEM_SORT_FIELDS)} "
                "LIMIT ? OFFSET ?",
                [*params, page.limit, page.offset],
            )
            rows = await cursor.fetchall()
        return Page(
            items=[self._row_to_item(row) for row in rows],
            total=total,
            page=page.page,
            limit=page.limit,
        )

    @db_operation("apply_movement")
    async def apply_movement(
        self,
        item_id: int,
        transaction_type: TransactionType,
        magnitude: int,
        unit_price: float,
        context: MovementContext,
    ) -> tuple[Item, StockTransaction]:
        """
        Apply one stock movement in a single write transaction.

        The quantity update is conditional on the result staying >= 0, so a
        movement that lost a race to another writer fails here instead of
        driving the quantity negative.
        """
        delta = transaction_type.signed(magnitude)
        now = datetime.utcnow()

        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE items SET quantity = quantity + ?, updated_at = ?
                WHERE id = ? AND quantity + ? >= 0
                """,
                (delta, iso(now), item_id, delta),
            )
            if cursor.rowcount == 0:
                cursor = await conn.execute(
                    "SELECT name, quantity FROM items WHERE id = ?", (item_id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise ItemNotFoundError(item_id)
                raise InsufficientStockError(
                    item_id=item_id,
                    requested=magnitude,
                    available=row["quantity"],
                    item_name=row["name"],
                )

            cursor = await conn.execute("SELECT * FROM items WHERE id = ?", (item_id,))
            item = self._row_to_item(await cursor.fetchone())
            status = derive_status(item.quantity, item.threshold)
            await conn.execute(
                "UPDATE items SET status = ? WHERE id = ?", (status.value, item_id)
            )
            item.status = status

            transaction = StockTransaction(
                item_id=item_id,
                type=transaction_type,
                quantity=magnitude,
                quantity_before=item.quantity - delta,
                quantity_after=item.quantity,
                unit_price=unit_price,
                reparation_id=context.reparation_id,
                supplier_id=context.supplier_id,
                reference=context.reference,
                notes=context.notes,
                created_by=context.created_by,
                created_at=now,
            )
            await insert_transaction(conn, transaction)

        return item, transaction

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> Item:
        return Item(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            quantity=row["quantity"],
            buy_price=row["buy_price"],
            sell_price=row["sell_price"],
            category_id=row["category_id"],
            supplier_id=row["supplier_id"],
            threshold=row["threshold"],
            item_code=row["item_code"],
            location=row["location"],
            notes=row["notes"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
