"""Application use cases."""

from src.application.use_cases.create_item import CreateItemResult, CreateItemUseCase
from src.application.use_cases.create_reparation import CreateReparationUseCase
from src.application.use_cases.delete_item import DeleteItemUseCase
from src.application.use_cases.delete_reparation import DeleteReparationUseCase
from src.application.use_cases.record_stock_transaction import (
    RecordStockTransactionUseCase,
)
from src.application.use_cases.update_item import UpdateItemUseCase
from src.application.use_cases.update_reparation import (
    UpdateReparationStatusUseCase,
    UpdateReparationUseCase,
)

__all__ = [
    "CreateItemUseCase",
    "CreateItemResult",
    "UpdateItemUseCase",
    "DeleteItemUseCase",
    "RecordStockTransactionUseCase",
    "CreateReparationUseCase",
    "UpdateReparationUseCase",
    "UpdateReparationStatusUseCase",
    "DeleteReparationUseCase",
]
