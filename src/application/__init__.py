"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers that write.
"""

from src.application.services import (
    get_reparation_lifecycle_service,
    get_stock_mutation_service,
    reset_services,
)
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

__all__ = [
    # Service factories
    "get_stock_mutation_service",
    "get_reparation_lifecycle_service",
    "reset_services",
    # Use cases
    "CreateItemUseCase",
    "UpdateItemUseCase",
    "DeleteItemUseCase",
    "RecordStockTransactionUseCase",
    "CreateReparationUseCase",
    "UpdateReparationUseCase",
    "UpdateReparationStatusUseCase",
    "DeleteReparationUseCase",
]
