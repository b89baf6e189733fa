"""Inventory item endpoints."""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_create_item_use_case,
    get_current_principal,
    get_delete_item_use_case,
    get_items,
    get_update_item_use_case,
    page_request,
    require_admin,
)
from src.application.dto.requests import CreateItemRequest, UpdateItemRequest
from src.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    ItemResponse,
    PaginatedResponse,
    paginated,
)
from src.application.use_cases import (
    CreateItemUseCase,
    DeleteItemUseCase,
    UpdateItemUseCase,
)
from src.config import get_settings
from src.core.entities.item import ItemFilter, StockStatus
from src.core.entities.principal import Principal
from src.core.exceptions import ItemNotFoundError
from src.core.validators import parse_enum
from src.infrastructure.storage.sqlite import SQLiteItemStore

router = APIRouter(prefix="/api/items", tags=["items"])


@router.get(
    "",
    response_model=PaginatedResponse[ItemResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_items(
    category_id: int | None = None,
    supplier_id: int | None = None,
    stock_status: str | None = Query(default=None, alias="status"),
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    sort: str = "-created_at",
    _: Principal = Depends(get_current_principal),
    store: SQLiteItemStore = Depends(get_items),
) -> PaginatedResponse[ItemResponse]:
    """List items with filters, sorting and pagination."""
    filters = ItemFilter(
        category_id=category_id,
        supplier_id=supplier_id,
        status=parse_enum(StockStatus, stock_status, "status") if stock_status else None,
        search=search,
    )
    request = page_request(page, limit, sort, get_settings().inventory.items_page_size)
    result = await store.list_items(filters, request)
    return paginated(result, ItemResponse)


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    principal: Principal = Depends(require_admin),
    use_case: CreateItemUseCase = Depends(get_create_item_use_case),
) -> ItemResponse:
    """Create an item; opening stock is recorded as an adjustment."""
    result = await use_case.execute(request, actor=principal.id)
    return use_case.to_response(result)


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    _: Principal = Depends(get_current_principal),
    store: SQLiteItemStore = Depends(get_items),
) -> ItemResponse:
    """Get a single item."""
    item = await store.get_item(item_id)
    if item is None:
        raise ItemNotFoundError(item_id)
    return ItemResponse.model_validate(item)


@router.put(
    "/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_item(
    item_id: int,
    request: UpdateItemRequest,
    _: Principal = Depends(require_admin),
    use_case: UpdateItemUseCase = Depends(get_update_item_use_case),
) -> ItemResponse:
    """Update item details. Quantity changes go through stock transactions."""
    item = await use_case.execute(item_id, request)
    return use_case.to_response(item)


@router.delete(
    "/{item_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_item(
    item_id: int,
    _: Principal = Depends(require_admin),
    use_case: DeleteItemUseCase = Depends(get_delete_item_use_case),
) -> DeleteResponse:
    """Delete an item without stock history."""
    await use_case.execute(item_id)
    return DeleteResponse(id=item_id, message="Item deleted")
