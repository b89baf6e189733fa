"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from src.core.entities.catalog import ServiceCategory, ServiceStatus
from src.core.entities.item import StockStatus
from src.core.entities.reparation import ReparationStatus
from src.core.entities.stock_transaction import TransactionType

T = TypeVar("T")


class EntityResponse(BaseModel):
    """Base for responses built straight from core entities."""

    model_config = ConfigDict(from_attributes=True)


# --- Items ---


class ItemResponse(EntityResponse):
    """Inventory item with derived values."""

    id: int
    name: str
    description: str | None = None
    quantity: int
    buy_price: float
    sell_price: float
    category_id: int | None = None
    supplier_id: int | None = None
    threshold: int
    status: StockStatus
    item_code: str | None = None
    location: str | None = None
    notes: str | None = None
    profit_margin: float = Field(..., description="sell_price - buy_price")
    profit_margin_percent: float = Field(..., description="Margin over buy price, %")
    created_at: datetime
    updated_at: datetime


# --- Stock transactions ---


class StockTransactionResponse(EntityResponse):
    """One ledger entry."""

    id: int
    item_id: int
    type: TransactionType
    quantity: int
    quantity_before: int
    quantity_after: int
    unit_price: float
    total_amount: float
    reparation_id: int | None = None
    supplier_id: int | None = None
    reference: str = ""
    notes: str = ""
    created_by: str | None = None
    created_at: datetime


class StockMovementResponse(BaseModel):
    """Result of a stock movement: the item after it and its ledger entry."""

    item: ItemResponse
    transaction: StockTransactionResponse


class TransactionStatsEntry(EntityResponse):
    type: TransactionType
    count: int
    total_quantity: int
    total_amount: float


class TransactionStatsResponse(BaseModel):
    """Ledger totals grouped by transaction type."""

    stats: list[TransactionStatsEntry] = Field(default=[])


# --- Reparations ---


class ReparationItemResponse(EntityResponse):
    id: int | None = None
    item_id: int
    quantity: int
    buy_price: float
    sell_price: float
    total_price: float
    profit: float


class ReparationServiceResponse(EntityResponse):
    id: int | None = None
    service_id: int
    price: float
    notes: str = ""


class ReparationResponse(EntityResponse):
    """Reparation with line snapshots and totals."""

    id: int
    vehicle_id: int
    description: str
    technician: str | None = None
    status: ReparationStatus
    start_date: datetime
    end_date: datetime | None = None
    items: list[ReparationItemResponse] = Field(default=[])
    services: list[ReparationServiceResponse] = Field(default=[])
    labor_cost: float
    parts_cost: float
    services_cost: float
    total_profit: float
    total_cost: float
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


# --- Catalog ---


class CategoryResponse(EntityResponse):
    id: int
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class SupplierResponse(EntityResponse):
    id: int
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ServiceResponse(EntityResponse):
    id: int
    name: str
    description: str | None = None
    price: float
    duration: float | None = None
    category: ServiceCategory
    status: ServiceStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class VehicleResponse(EntityResponse):
    id: int
    make: str
    model: str
    year: int
    license_plate: str | None = None
    vin: str | None = None
    owner_name: str
    owner_phone: str | None = None
    owner_email: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


# --- Shared ---


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results."""

    items: list[T] = Field(default=[])
    total: int = Field(..., description="Matching records across all pages")
    page: int
    limit: int
    pages: int


class DeleteResponse(BaseModel):
    """Acknowledgement of a deletion."""

    id: int
    deleted: bool = True
    message: str


class ProviderHealthResponse(BaseModel):
    """Health of one backing component."""

    name: str
    available: bool
    latency_ms: float | None = None
    idle_connections: int | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    schema_version: str | None = None
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ITEM_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | dict[str, Any] | None = Field(
        default=None, description="Additional details (structured for domain errors)"
    )
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


def paginated(page, response_cls: type[EntityResponse]) -> PaginatedResponse:
    """Wrap a core ``Page`` of entities in the paginated envelope."""
    return PaginatedResponse[response_cls](
        items=[response_cls.model_validate(entity) for entity in page.items],
        total=page.total,
        page=page.page,
        limit=page.limit,
        pages=page.pages,
    )
