"""
Service factory functions for dependency injection.

This module wires the SQLite store implementations to the core services.
Use cases and API dependencies import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from src.core.services import ReparationLifecycleService, StockMutationService

if TYPE_CHECKING:
    from src.core.interfaces import (
        IItemStore,
        IReparationStore,
        IServiceStore,
        IVehicleStore,
    )


# Singleton service instances
_stock_mutation_service: StockMutationService | None = None
_reparation_lifecycle_service: ReparationLifecycleService | None = None


async def get_stock_mutation_service(
    item_store: "IItemStore | None" = None,
) -> StockMutationService:
    """
    Get or create the StockMutationService instance.

    One instance per process so every caller shares the same per-item locks.

    Args:
        item_store: Optional item store override (returns a fresh service)
    """
    global _stock_mutation_service

    if item_store is not None:
        return StockMutationService(item_store)

    if _stock_mutation_service is None:
        from src.infrastructure.storage.sqlite import get_item_store

        _stock_mutation_service = StockMutationService(await get_item_store())

    return _stock_mutation_service


async def get_reparation_lifecycle_service(
    reparation_store: "IReparationStore | None" = None,
    item_store: "IItemStore | None" = None,
    vehicle_store: "IVehicleStore | None" = None,
    service_store: "IServiceStore | None" = None,
    stock: StockMutationService | None = None,
) -> ReparationLifecycleService:
    """
    Get or create the ReparationLifecycleService instance.

    Creates infrastructure dependencies if not provided. Passing any
    override builds a fresh, non-cached instance.
    """
    global _reparation_lifecycle_service

    overridden = any(
        dep is not None
        for dep in (reparation_store, item_store, vehicle_store, service_store, stock)
    )
    if not overridden and _reparation_lifecycle_service is not None:
        return _reparation_lifecycle_service

    from src.infrastructure.storage.sqlite import (
        get_item_store,
        get_reparation_store,
        get_service_store,
        get_vehicle_store,
    )

    item_store = item_store or await get_item_store()
    service = ReparationLifecycleService(
        reparation_store=reparation_store or await get_reparation_store(),
        item_store=item_store,
        vehicle_store=vehicle_store or await get_vehicle_store(),
        service_store=service_store or await get_service_store(),
        stock=stock or await get_stock_mutation_service(
            item_store if overridden else None
        ),
    )
    if not overridden:
        _reparation_lifecycle_service = service
    return service


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _stock_mutation_service, _reparation_lifecycle_service

    _stock_mutation_service = None
    _reparation_lifecycle_service = None
