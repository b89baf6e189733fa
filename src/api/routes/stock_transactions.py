"""Stock ledger endpoints.

Entries are append-only: there is no update or delete route.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_current_principal,
    get_ledger,
    get_record_stock_transaction_use_case,
    page_request,
)
from src.application.dto.requests import CreateStockTransactionRequest
from src.application.dto.responses import (
    ErrorResponse,
    PaginatedResponse,
    StockMovementResponse,
    StockTransactionResponse,
    TransactionStatsEntry,
    TransactionStatsResponse,
    paginated,
)
from src.application.use_cases import RecordStockTransactionUseCase
from src.config import get_settings
from src.core.entities.principal import Principal
from src.core.entities.stock_transaction import TransactionFilter, TransactionType
from src.core.exceptions import TransactionNotFoundError
from src.core.validators import parse_enum
from src.infrastructure.storage.sqlite import SQLiteLedgerStore

router = APIRouter(prefix="/api/stock-transactions", tags=["stock-transactions"])


@router.get(
    "",
    response_model=PaginatedResponse[StockTransactionResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_transactions(
    item_id: int | None = None,
    type: str | None = None,
    reparation_id: int | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    sort: str = "-created_at",
    _: Principal = Depends(get_current_principal),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> PaginatedResponse[StockTransactionResponse]:
    """List ledger entries with filters, sorting and pagination."""
    filters = TransactionFilter(
        item_id=item_id,
        type=parse_enum(TransactionType, type, "type") if type else None,
        reparation_id=reparation_id,
        start_date=start_date,
        end_date=end_date,
    )
    request = page_request(
        page, limit, sort, get_settings().inventory.transactions_page_size
    )
    result = await store.list_transactions(filters, request)
    return paginated(result, StockTransactionResponse)


@router.post(
    "",
    response_model=StockMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def create_transaction(
    request: CreateStockTransactionRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: RecordStockTransactionUseCase = Depends(
        get_record_stock_transaction_use_case
    ),
) -> StockMovementResponse:
    """Record a manual movement (purchase, adjustment, damage, supplier return)."""
    result = await use_case.execute(request, actor=principal.id)
    return use_case.to_response(result)


@router.get("/stats", response_model=TransactionStatsResponse)
async def transaction_stats(
    _: Principal = Depends(get_current_principal),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> TransactionStatsResponse:
    """Count, quantity and amount totals per transaction type."""
    stats = await store.get_stats()
    return TransactionStatsResponse(
        stats=[TransactionStatsEntry.model_validate(entry) for entry in stats]
    )


@router.get(
    "/{transaction_id}",
    response_model=StockTransactionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_transaction(
    transaction_id: int,
    _: Principal = Depends(get_current_principal),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> StockTransactionResponse:
    """Get a single ledger entry."""
    transaction = await store.get_transaction(transaction_id)
    if transaction is None:
        raise TransactionNotFoundError(transaction_id)
    return StockTransactionResponse.model_validate(transaction)
