"""SQLite implementation of the stock ledger."""

import aiosqlite

from src.config import get_logger
from src.core.entities.pagination import Page, PageRequest
from src.core.entities.stock_transaction import (
    StockTransaction,
    TransactionFilter,
    TransactionStats,
)
from src.core.interfaces.ledger_store import ILedgerStore
from src.infrastructure.storage.sqlite.base import db_operation, iso, order_by
from src.infrastructure.storage.sqlite.connection import get_connection

logger = get_logger(__name__)

TRANSACTION_SORT_FIELDS = frozenset(
    {"created_at", "quantity", "total_amount", "unit_price", "type", "item_id"}
)


async def insert_transaction(
    conn: aiosqlite.Connection, transaction: StockTransaction
) -> StockTransaction:
    """Append a ledger entry on the caller's connection and transaction."""
    cursor = await conn.execute(
        """
        INSERT INTO stock_transactions (
            item_id, type, quantity, quantity_before, quantity_after,
            unit_price, total_amount, reparation_id, supplier_id,
            reference, notes, created_by, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            transaction.item_id,
            transaction.type.value,
            transaction.quantity,
            transaction.quantity_before,
            transaction.quantity_after,
            transaction.unit_price,
            transaction.total_amount,
            transaction.reparation_id,
            transaction.supplier_id,
            transaction.reference,
            transaction.notes,
            transaction.created_by,
            iso(transaction.created_at),
        ),
    )
    transaction.id = cursor.lastrowid
    logger.debug(
        "stock_transaction_recorded",
        transaction_id=transaction.id,
        item_id=transaction.item_id,
        type=transaction.type.value,
        quantity=transaction.quantity,
    )
    return transaction


class SQLiteLedgerStore(ILedgerStore):
    """Read side of the stock ledger."""

    @db_operation("get_transaction")
    async def get_transaction(self, transaction_id: int) -> StockTransaction | None:
        """Get a ledger entry by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_transactions WHERE id = ?", (transaction_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_transaction(row) if row else None

    @db_operation("list_transactions")
    async def list_transactions(
        self, filters: TransactionFilter, page: PageRequest
    ) -> Page[StockTransaction]:
        """List ledger entries, newest first unless sorted otherwise."""
        clauses = []
        params: list = []
        if filters.item_id is not None:
            clauses.append("item_id = ?")
            params.append(filters.item_id)
        if filters.type is not None:
            clauses.append("type = ?")
            params.append(filters.type.value)
        if filters.reparation_id is not None:
            clauses.append("reparation_id = ?")
            params.append(filters.reparation_id)
        if filters.start_date is not None:
            clauses.append("created_at >= ?")
            params.append(iso(filters.start_date))
        if filters.end_date is not None:
            clauses.append("created_at <= ?")
            params.append(iso(filters.end_date))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM stock_transactions {where}", params
            )
            total = (await cursor.fetchone())[0]
            cursor = await conn.execute(
                f"SELECT * FROM stock_transactions {where} "
                f"{order_by(page, TRANSACTION_SORT_FIELDS)} LIMIT ? OFFSET ?",
                [*params, page.limit, page.offset],
            )
            rows = await cursor.fetchall()
        return Page(
            items=[self._row_to_transaction(row) for row in rows],
            total=total,
            page=page.page,
            limit=page.limit,
        )

    @db_operation("get_transaction_stats")
    async def get_stats(self) -> list[TransactionStats]:
        """Totals per transaction type, most frequent first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT type,
                       COUNT(*) AS count,
                       SUM(quantity) AS total_quantity,
                       SUM(total_amount) AS total_amount
                FROM stock_transactions
                GROUP BY type
                ORDER BY count DESC, type
                """
            )
            rows = await cursor.fetchall()
        return [
            TransactionStats(
                type=row["type"],
                count=row["count"],
                total_quantity=row["total_quantity"] or 0,
                total_amount=row["total_amount"] or 0.0,
            )
            for row in rows
        ]

    @db_operation("count_item_transactions")
    async def count_for_item(self, item_id: int) -> int:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM stock_transactions WHERE item_id = ?", (item_id,)
            )
            return (await cursor.fetchone())[0]

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> StockTransaction:
        return StockTransaction(
            id=row["id"],
            item_id=row["item_id"],
            type=row["type"],
            quantity=row["quantity"],
            quantity_before=row["quantity_before"],
            quantity_after=row["quantity_after"],
            unit_price=row["unit_price"],
            reparation_id=row["reparation_id"],
            supplier_id=row["supplier_id"],
            reference=row["reference"],
            notes=row["notes"],
            created_by=row["created_by"],
            created_at=row["created_at"],
        )
