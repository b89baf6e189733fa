"""SQLite implementations of the catalog stores."""

from datetime import datetime
from typing import Generic, TypeVar

import aiosqlite
from pydantic import BaseModel

from src.config import get_logger
from src.core.entities.catalog import Category, Service, Supplier, Vehicle
from src.core.entities.pagination import Page, PageRequest
from src.core.exceptions import (
    CategoryNotFoundError,
    ConflictError,
    NotFoundError,
    ServiceNotFoundError,
    SupplierNotFoundError,
    VehicleNotFoundError,
)
from src.core.interfaces.catalog_store import (
    ICategoryStore,
    IServiceStore,
    ISupplierStore,
    IVehicleStore,
)
from src.infrastructure.storage.sqlite.base import db_operation, iso, order_by
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class SQLiteCatalogStore(Generic[T]):
    """
    CRUD over one catalog table.

    Subclasses name the table, the entity model, the writable columns and
    the columns a free-text search looks at.
    """

    table: str
    model: type[T]
    columns: tuple[str, ...]
    search_columns: tuple[str, ...] = ("name",)
    sort_fields: frozenset[str] = frozenset({"name", "created_at", "updated_at"})
    not_found: type[NotFoundError] = NotFoundError

    def _values(self, entity: T) -> list:
        values = []
        for column in self.columns:
            value = getattr(entity, column)
            if hasattr(value, "value"):
                value = value.value
            values.append(value)
        return values

    @db_operation("catalog_create")
    async def create(self, entity: T) -> T:
        now = datetime.utcnow()
        entity.created_at = now
        entity.updated_at = now
        columns = [*self.columns, "created_at", "updated_at"]
        placeholders = ", ".join("?" for _ in columns)
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES ({placeholders})",
                    [*self._values(entity), iso(now), iso(now)],
                )
                entity.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise ConflictError(
                f"{self.model.__name__} conflicts with an existing record",
                code="CONFLICT",
                details={"error": str(e)},
            ) from e
        logger.info(f"{self.table}_created", id=entity.id)
        return entity

    @db_operation("catalog_get")
    async def get(self, entity_id: int) -> T | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (entity_id,)
            )
            row = await cursor.fetchone()
            return self.model(**dict(row)) if row else None

    @db_operation("catalog_update")
    async def update(self, entity: T) -> T:
        entity.updated_at = datetime.utcnow()
        assignments = ", ".join(f"{column} = ?" for column in self.columns)
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    f"UPDATE {self.table} SET {assignments}, updated_at = ? WHERE id = ?",
                    [*self._values(entity), iso(entity.updated_at), entity.id],
                )
                if cursor.rowcount == 0:
                    raise self.not_found(entity.id)
        except aiosqlite.IntegrityError as e:
            raise ConflictError(
                f"{self.model.__name__} conflicts with an existing record",
                code="CONFLICT",
                details={"error": str(e)},
            ) from e
        logger.info(f"{self.table}_updated", id=entity.id)
        return entity

    @db_operation("catalog_delete")
    async def delete(self, entity_id: int) -> bool:
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    f"DELETE FROM {self.table} WHERE id = ?", (entity_id,)
                )
                deleted = cursor.rowcount > 0
        except aiosqlite.IntegrityError as e:
            raise ConflictError(
                f"{self.model.__name__} {entity_id} is still referenced",
                code="IN_USE",
                details={"id": entity_id},
            ) from e
        if deleted:
            logger.info(f"{self.table}_deleted", id=entity_id)
        return deleted

    @db_operation("catalog_list")
    async def list_all(self, page: PageRequest, search: str | None = None) -> Page[T]:
        where = ""
        params: list = []
        if search:
            where = "WHERE " + " OR ".join(f"{c} LIKE ?" for c in self.search_columns)
            params = [f"%{search}%"] * len(self.search_columns)

        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM {self.table} {where}", params)
            total = (await cursor.fetchone())[0]
            cursor = await conn.execute(
                f"SELECT * FROM {self.table} {where} "
                f"{order_by(page, self.sort_fields)} LIMIT ? OFFSET ?",
                [*params, page.limit, page.offset],
            )
            rows = await cursor.fetchall()
        return Page(
            items=[self.model(**dict(row)) for row in rows],
            total=total,
            page=page.page,
            limit=page.limit,
        )


class SQLiteCategoryStore(SQLiteCatalogStore[Category], ICategoryStore):
    table = "categories"
    model = Category
    columns = ("name", "description")
    not_found = CategoryNotFoundError


class SQLiteSupplierStore(SQLiteCatalogStore[Supplier], ISupplierStore):
    table = "suppliers"
    model = Supplier
    columns = ("name", "contact_person", "email", "phone", "address", "notes")
    search_columns = ("name", "contact_person", "email")
    not_found = SupplierNotFoundError


class SQLiteServiceStore(SQLiteCatalogStore[Service], IServiceStore):
    table = "services"
    model = Service
    columns = ("name", "description", "price", "duration", "category", "status", "notes")
    sort_fields = frozenset({"name", "price", "category", "status", "created_at", "updated_at"})
    not_found = ServiceNotFoundError


class SQLiteVehicleStore(SQLiteCatalogStore[Vehicle], IVehicleStore):
    table = "vehicles"
    model = Vehicle
    columns = (
        "make",
        "model",
        "year",
        "license_plate",
        "vin",
        "owner_name",
        "owner_phone",
        "owner_email",
        "notes",
    )
    search_columns = ("make", "model", "license_plate", "owner_name")
    sort_fields = frozenset({"make", "model", "year", "owner_name", "created_at", "updated_at"})
    not_found = VehicleNotFoundError

