"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteCategoryStore,
    SQLiteItemStore,
    SQLiteLedgerStore,
    SQLiteReparationStore,
    SQLiteServiceStore,
    SQLiteSupplierStore,
    SQLiteVehicleStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteItemStore",
    "SQLiteLedgerStore",
    "SQLiteReparationStore",
    "SQLiteCategoryStore",
    "SQLiteSupplierStore",
    "SQLiteServiceStore",
    "SQLiteVehicleStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
