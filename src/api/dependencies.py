"""
Dependency injection container for FastAPI.

Provides stores, services and use cases to route handlers. Tests swap
any of these through ``app.dependency_overrides``.
"""

from src.api.security import get_current_principal, require_admin, require_roles
from src.application.use_cases import (
    CreateItemUseCase,
    CreateReparationUseCase,
    DeleteItemUseCase,
    DeleteReparationUseCase,
    RecordStockTransactionUseCase,
    UpdateItemUseCase,
    UpdateReparationStatusUseCase,
    UpdateReparationUseCase,
)
from src.config import get_settings
from src.core.entities.pagination import PageRequest
from src.infrastructure.storage.sqlite import (
    SQLiteCategoryStore,
    SQLiteItemStore,
    SQLiteLedgerStore,
    SQLiteReparationStore,
    SQLiteServiceStore,
    SQLiteSupplierStore,
    SQLiteVehicleStore,
    get_category_store,
    get_item_store,
    get_ledger_store,
    get_reparation_store,
    get_service_store,
    get_supplier_store,
    get_vehicle_store,
)

__all__ = [
    "get_current_principal",
    "require_admin",
    "require_roles",
]


def page_request(
    page: int,
    limit: int | None,
    sort: str,
    default_limit: int,
) -> PageRequest:
    """Build a PageRequest, clamping the page size to the configured maximum."""
    max_limit = get_settings().inventory.max_page_size
    return PageRequest(page=page, limit=min(limit or default_limit, max_limit), sort=sort)


# Store dependencies
async def get_items() -> SQLiteItemStore:
    """Get item store."""
    return await get_item_store()


async def get_ledger() -> SQLiteLedgerStore:
    """Get stock ledger store."""
    return await get_ledger_store()


async def get_reparations() -> SQLiteReparationStore:
    """Get reparation store."""
    return await get_reparation_store()


async def get_categories() -> SQLiteCategoryStore:
    return await get_category_store()


async def get_suppliers() -> SQLiteSupplierStore:
    return await get_supplier_store()


async def get_services() -> SQLiteServiceStore:
    return await get_service_store()


async def get_vehicles() -> SQLiteVehicleStore:
    return await get_vehicle_store()


# Use case dependencies
def get_create_item_use_case() -> CreateItemUseCase:
    """Get create item use case."""
    return CreateItemUseCase()


def get_update_item_use_case() -> UpdateItemUseCase:
    """Get update item use case."""
    return UpdateItemUseCase()


def get_delete_item_use_case() -> DeleteItemUseCase:
    """Get delete item use case."""
    return DeleteItemUseCase()


def get_record_stock_transaction_use_case() -> RecordStockTransactionUseCase:
    """Get record stock transaction use case."""
    return RecordStockTransactionUseCase()


def get_create_reparation_use_case() -> CreateReparationUseCase:
    """Get create reparation use case."""
    return CreateReparationUseCase()


def get_update_reparation_use_case() -> UpdateReparationUseCase:
    """Get full update reparation use case."""
    return UpdateReparationUseCase()


def get_update_reparation_status_use_case() -> UpdateReparationStatusUseCase:
    """Get reparation status update use case."""
    return UpdateReparationStatusUseCase()


def get_delete_reparation_use_case() -> DeleteReparationUseCase:
    """Get delete reparation use case."""
    return DeleteReparationUseCase()
