"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.catalog_store import (
    SQLiteCategoryStore,
    SQLiteServiceStore,
    SQLiteSupplierStore,
    SQLiteVehicleStore,
)
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.item_store import SQLiteItemStore
from src.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from src.infrastructure.storage.sqlite.reparation_store import SQLiteReparationStore

# Singleton instances
_item_store: SQLiteItemStore | None = None
_ledger_store: SQLiteLedgerStore | None = None
_reparation_store: SQLiteReparationStore | None = None
_category_store: SQLiteCategoryStore | None = None
_supplier_store: SQLiteSupplierStore | None = None
_service_store: SQLiteServiceStore | None = None
_vehicle_store: SQLiteVehicleStore | None = None


async def get_item_store() -> SQLiteItemStore:
    """Get singleton item store instance."""
    global _item_store
    if _item_store is None:
        _item_store = SQLiteItemStore()
    return _item_store


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


async def get_reparation_store() -> SQLiteReparationStore:
    """Get singleton reparation store instance."""
    global _reparation_store
    if _reparation_store is None:
        _reparation_store = SQLiteReparationStore()
    return _reparation_store


async def get_category_store() -> SQLiteCategoryStore:
    global _category_store
    if _category_store is None:
        _category_store = SQLiteCategoryStore()
    return _category_store


async def get_supplier_store() -> SQLiteSupplierStore:
    global _supplier_store
    if _supplier_store is None:
        _supplier_store = SQLiteSupplierStore()
    return _supplier_store


async def get_service_store() -> SQLiteServiceStore:
    global _service_store
    if _service_store is None:
        _service_store = SQLiteServiceStore()
    return _service_store


async def get_vehicle_store() -> SQLiteVehicleStore:
    global _vehicle_store
    if _vehicle_store is None:
        _vehicle_store = SQLiteVehicleStore()
    return _vehicle_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteItemStore",
    "SQLiteLedgerStore",
    "SQLiteReparationStore",
    "SQLiteCategoryStore",
    "SQLiteSupplierStore",
    "SQLiteServiceStore",
    "SQLiteVehicleStore",
    # Factory functions
    "get_item_store",
    "get_ledger_store",
    "get_reparation_store",
    "get_category_store",
    "get_supplier_store",
    "get_service_store",
    "get_vehicle_store",
]
