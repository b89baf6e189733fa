"""Record Stock Transaction Use Case -- operator-entered movement."""

from src.application.dto.requests import CreateStockTransactionRequest
from src.application.dto.responses import (
    ItemResponse,
    StockMovementResponse,
    StockTransactionResponse,
)
from src.config import get_logger
from src.core.entities.stock_transaction import MovementContext
from src.core.exceptions import SupplierNotFoundError
from src.core.interfaces.catalog_store import ISupplierStore
from src.core.services.stock_mutation import MovementResult, StockMutationService

logger = get_logger(__name__)


class RecordStockTransactionUseCase:
    """Record a purchase, adjustment, damage or return to supplier."""

    def __init__(
        self,
        stock: StockMutationService | None = None,
        supplier_store: ISupplierStore | None = None,
    ):
        self._stock = stock
        self._supplier_store = supplier_store

    async def _get_stock(self) -> StockMutationService:
        if self._stock is None:
            from src.application.services import get_stock_mutation_service

            self._stock = await get_stock_mutation_service()
        return self._stock

    async def _get_supplier_store(self) -> ISupplierStore:
        if self._supplier_store is None:
            from src.infrastructure.storage.sqlite import get_supplier_store

            self._supplier_store = await get_supplier_store()
        return self._supplier_store

    async def execute(
        self,
        request: CreateStockTransactionRequest,
        actor: str | None = None,
    ) -> MovementResult:
        """Execute record stock transaction use case."""
        logger.info(
            "record_stock_transaction_started",
            item_id=request.item_id,
            type=request.type,
            quantity=request.quantity,
        )

        if request.supplier_id is not None:
            if await (await self._get_supplier_store()).get(request.supplier_id) is None:
                raise SupplierNotFoundError(request.supplier_id)

        stock = await self._get_stock()
        return await stock.record_manual_movement(
            request.item_id,
            request.type,
            request.quantity,
            MovementContext(
                unit_price=request.unit_price,
                reference=request.reference,
                notes=request.notes,
                created_by=actor,
                supplier_id=request.supplier_id,
            ),
        )

    def to_response(self, result: MovementResult) -> StockMovementResponse:
        """Convert result to API response."""
        return StockMovementResponse(
            item=ItemResponse.model_validate(result.item),
            transaction=StockTransactionResponse.model_validate(result.transaction),
        )
