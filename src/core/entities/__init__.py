"""Core domain entities."""

from src.core.entities.catalog import (
    Category,
    Service,
    ServiceCategory,
    ServiceStatus,
    Supplier,
    Vehicle,
)
from src.core.entities.item import (
    DEFAULT_THRESHOLD,
    Item,
    ItemFilter,
    StockStatus,
    derive_status,
    generate_item_code,
)
from src.core.entities.pagination import Page, PageRequest
from src.core.entities.principal import Principal, Role
from src.core.entities.reparation import (
    Reparation,
    ReparationFilter,
    ReparationItem,
    ReparationService,
    ReparationStatus,
)
from src.core.entities.stock_transaction import (
    ADDITIVE_TYPES,
    MANUAL_TYPES,
    MovementContext,
    StockTransaction,
    TransactionFilter,
    TransactionStats,
    TransactionType,
)

__all__ = [
    # Catalog
    "Category",
    "Supplier",
    "Service",
    "ServiceCategory",
    "ServiceStatus",
    "Vehicle",
    # Items
    "Item",
    "ItemFilter",
    "StockStatus",
    "DEFAULT_THRESHOLD",
    "derive_status",
    "generate_item_code",
    # Ledger
    "StockTransaction",
    "TransactionType",
    "TransactionFilter",
    "TransactionStats",
    "MovementContext",
    "ADDITIVE_TYPES",
    "MANUAL_TYPES",
    # Reparations
    "Reparation",
    "ReparationItem",
    "ReparationService",
    "ReparationStatus",
    "ReparationFilter",
    # Shared
    "Page",
    "PageRequest",
    "Principal",
    "Role",
]
