"""API route modules."""

from src.api.routes.catalog import (
    categories_router,
    services_router,
    suppliers_router,
    vehicles_router,
)
from src.api.routes.health import router as health_router
from src.api.routes.items import router as items_router
from src.api.routes.reparations import router as reparations_router
from src.api.routes.stock_transactions import router as stock_transactions_router

__all__ = [
    "health_router",
    "items_router",
    "stock_transactions_router",
    "reparations_router",
    "categories_router",
    "suppliers_router",
    "services_router",
    "vehicles_router",
]
