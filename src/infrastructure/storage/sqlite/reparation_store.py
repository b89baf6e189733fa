"""SQLite implementation of reparation storage."""

from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.pagination import Page, PageRequest
from src.core.entities.reparation import (
    Reparation,
    ReparationFilter,
    ReparationItem,
    ReparationService,
)
from src.core.exceptions import ReparationNotFoundError
from src.core.interfaces.reparation_store import IReparationStore
from src.infrastructure.storage.sqlite.base import db_operation, iso, order_by
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

REPARATION_SORT_FIELDS = frozenset(
    {"created_at", "updated_at", "start_date", "end_date", "status", "total_cost", "technician"}
)


class SQLiteReparationStore(IReparationStore):
    """SQLite implementation of reparation header and line storage."""

    @db_operation("create_reparation")
    async def create_reparation(self, reparation: Reparation) -> Reparation:
        """Insert header and lines in one transaction."""
        now = datetime.utcnow()
        reparation.created_at = now
        reparation.updated_at = now
        reparation.recompute_totals()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO reparations (
                    vehicle_id, description, technician, status, start_date, end_date,
                    labor_cost, parts_cost, services_cost, total_profit, total_cost,
                    notes, created_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    reparation.vehicle_id,
                    reparation.description,
                    reparation.technician,
                    reparation.status.value,
                    iso(reparation.start_date),
                    iso(reparation.end_date),
                    reparation.labor_cost,
                    reparation.parts_cost,
                    reparation.services_cost,
                    reparation.total_profit,
                    reparation.total_cost,
                    reparation.notes,
                    reparation.created_by,
                    iso(reparation.created_at),
                    iso(reparation.updated_at),
                ),
            )
            reparation.id = cursor.lastrowid
            await self._insert_lines(conn, reparation)

        logger.info("reparation_stored", reparation_id=reparation.id)
        return reparation

    @db_operation("get_reparation")
    async def get_reparation(self, reparation_id: int) -> Reparation | None:
        """Get a reparation with its lines."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM reparations WHERE id = ?", (reparation_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._load(conn, row)

    @db_operation("update_reparation")
    async def update_reparation(self, reparation: Reparation) -> Reparation:
        """Write header fields and replace both line sets."""
        reparation.updated_at = datetime.utcnow()
        reparation.recompute_totals()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE reparations SET
                    vehicle_id = ?, description = ?, technician = ?, status = ?,
                    start_date = ?, end_date = ?, labor_cost = ?, parts_cost = ?,
                    services_cost = ?, total_profit = ?, total_cost = ?, notes = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    reparation.vehicle_id,
                    reparation.description,
                    reparation.technician,
                    reparation.status.value,
                    iso(reparation.start_date),
                    iso(reparation.end_date),
                    reparation.labor_cost,
                    reparation.parts_cost,
                    reparation.services_cost,
                    reparation.total_profit,
                    reparation.total_cost,
                    reparation.notes,
                    iso(reparation.updated_at),
                    reparation.id,
                ),
            )
            if cursor.rowcount == 0:
                raise ReparationNotFoundError(reparation.id)

            await conn.execute(
                "DELETE FROM reparation_items WHERE reparation_id = ?", (reparation.id,)
            )
            await conn.execute(
                "DELETE FROM reparation_services WHERE reparation_id = ?", (reparation.id,)
            )
            await self._insert_lines(conn, reparation)

        return reparation

    @db_operation("delete_reparation")
    async def delete_reparation(self, reparation_id: int) -> bool:
        """Delete a reparation; its lines cascade."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM reparations WHERE id = ?", (reparation_id,)
            )
            return cursor.rowcount > 0

    @db_operation("list_reparations")
    async def list_reparations(
        self, filters: ReparationFilter, page: PageRequest
    ) -> Page[Reparation]:
        clauses = []
        params: list = []
        if filters.vehicle_id is not None:
            clauses.append("vehicle_id = ?")
            params.append(filters.vehicle_id)
        if filters.status is not None:
            clauses.append("status = ?")
            params.append(filters.status.value)
        if filters.technician:
            clauses.append("technician LIKE ?")
            params.append(f"%{filters.technician}%")
        if filters.search:
            clauses.append("description LIKE ?")
            params.append(f"%{filters.search}%")
        if filters.start_date is not None:
            clauses.append("start_date >= ?")
            params.append(iso(filters.start_date))
        if filters.end_date is not None:
            clauses.append("end_date <= ?")
            params.append(iso(filters.end_date))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM reparations {where}", params)
            total = (await cursor.fetchone())[0]
            cursor = await conn.execute(
                f"SELECT * FROM reparations {where} "
                f"{order_by(page, REPARATION_SORT_FIELDS)} LIMIT ? OFFSET ?",
                [*params, page.limit, page.offset],
            )
            rows = await cursor.fetchall()
            reparations = [await self._load(conn, row) for row in rows]

        return Page(items=reparations, total=total, page=page.page, limit=page.limit)

    @db_operation("count_item_usage")
    async def count_item_usage(self, item_id: int) -> int:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM reparation_items WHERE item_id = ?", (item_id,)
            )
            return (await cursor.fetchone())[0]

    async def _insert_lines(self, conn: aiosqlite.Connection, reparation: Reparation) -> None:
        for line_number, line in enumerate(reparation.items, start=1):
            cursor = await conn.execute(
                """
                INSERT INTO reparation_items (
                    reparation_id, line_number, item_id, quantity,
                    buy_price, sell_price, total_price
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    reparation.id,
                    line_number,
                    line.item_id,
                    line.quantity,
                    line.buy_price,
                    line.sell_price,
                    line.total_price,
                ),
            )
            line.id = cursor.lastrowid

        for line_number, service in enumerate(reparation.services, start=1):
            cursor = await conn.execute(
                """
                INSERT INTO reparation_services (
                    reparation_id, line_number, service_id, price, notes
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (reparation.id, line_number, service.service_id, service.price, service.notes),
            )
            service.id = cursor.lastrowid

    async def _load(self, conn: aiosqlite.Connection, row: aiosqlite.Row) -> Reparation:
        cursor = await conn.execute(
            "SELECT * FROM reparation_items WHERE reparation_id = ? ORDER BY line_number",
            (row["id"],),
        )
        items = [
            ReparationItem(
                id=r["id"],
                item_id=r["item_id"],
                quantity=r["quantity"],
                buy_price=r["buy_price"],
                sell_price=r["sell_price"],
            )
            for r in await cursor.fetchall()
        ]
        cursor = await conn.execute(
            "SELECT * FROM reparation_services WHERE reparation_id = ? ORDER BY line_number",
            (row["id"],),
        )
        services = [
            ReparationService(
                id=r["id"],
                service_id=r["service_id"],
                price=r["price"],
                notes=r["notes"],
            )
            for r in await cursor.fetchall()
        ]
        return Reparation(
            id=row["id"],
            vehicle_id=row["vehicle_id"],
            description=row["description"],
            technician=row["technician"],
            status=row["status"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            items=items,
            services=services,
            labor_cost=row["labor_cost"],
            notes=row["notes"],
            created_by=row["created_by"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
