"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    CreateCategoryRequest,
    CreateItemRequest,
    CreateReparationRequest,
    CreateServiceRequest,
    CreateStockTransactionRequest,
    CreateSupplierRequest,
    CreateVehicleRequest,
    ReparationItemLine,
    ReparationServiceLine,
    UpdateCategoryRequest,
    UpdateItemRequest,
    UpdateReparationRequest,
    UpdateReparationStatusRequest,
    UpdateServiceRequest,
    UpdateSupplierRequest,
    UpdateVehicleRequest,
)
from src.application.dto.responses import (
    CategoryResponse,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    ItemResponse,
    PaginatedResponse,
    ProviderHealthResponse,
    ReparationItemResponse,
    ReparationResponse,
    ReparationServiceResponse,
    ServiceResponse,
    StockMovementResponse,
    StockTransactionResponse,
    SupplierResponse,
    TransactionStatsEntry,
    TransactionStatsResponse,
    VehicleResponse,
    paginated,
)

__all__ = [
    # Requests
    "CreateItemRequest",
    "UpdateItemRequest",
    "CreateStockTransactionRequest",
    "CreateReparationRequest",
    "UpdateReparationRequest",
    "UpdateReparationStatusRequest",
    "ReparationItemLine",
    "ReparationServiceLine",
    "CreateCategoryRequest",
    "UpdateCategoryRequest",
    "CreateSupplierRequest",
    "UpdateSupplierRequest",
    "CreateServiceRequest",
    "UpdateServiceRequest",
    "CreateVehicleRequest",
    "UpdateVehicleRequest",
    # Responses
    "ItemResponse",
    "StockTransactionResponse",
    "StockMovementResponse",
    "TransactionStatsEntry",
    "TransactionStatsResponse",
    "ReparationResponse",
    "ReparationItemResponse",
    "ReparationServiceResponse",
    "CategoryResponse",
    "SupplierResponse",
    "ServiceResponse",
    "VehicleResponse",
    "PaginatedResponse",
    "DeleteResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
    "paginated",
]
