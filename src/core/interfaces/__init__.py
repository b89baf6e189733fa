"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.catalog_store import (
    ICatalogStore,
    ICategoryStore,
    IServiceStore,
    ISupplierStore,
    IVehicleStore,
)
from src.core.interfaces.item_store import IItemStore
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.interfaces.reparation_store import IReparationStore

__all__ = [
    "IItemStore",
    "ILedgerStore",
    "IReparationStore",
    "ICatalogStore",
    "ICategoryStore",
    "ISupplierStore",
    "IServiceStore",
    "IVehicleStore",
]
