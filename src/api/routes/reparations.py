"""Reparation endpoints.

Creating, fully updating or deleting a reparation moves stock for its
parts; the status-only update never does.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_create_reparation_use_case,
    get_current_principal,
    get_delete_reparation_use_case,
    get_reparations,
    get_update_reparation_status_use_case,
    get_update_reparation_use_case,
    page_request,
)
from src.application.dto.requests import (
    CreateReparationRequest,
    UpdateReparationRequest,
    UpdateReparationStatusRequest,
)
from src.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    PaginatedResponse,
    ReparationResponse,
    paginated,
)
from src.application.use_cases import (
    CreateReparationUseCase,
    DeleteReparationUseCase,
    UpdateReparationStatusUseCase,
    UpdateReparationUseCase,
)
from src.config import get_settings
from src.core.entities.principal import Principal
from src.core.entities.reparation import ReparationFilter, ReparationStatus
from src.core.exceptions import ReparationNotFoundError
from src.core.validators import parse_enum
from src.infrastructure.storage.sqlite import SQLiteReparationStore

router = APIRouter(prefix="/api/reparations", tags=["reparations"])

_STOCK_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get(
    "",
    response_model=PaginatedResponse[ReparationResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_reparations(
    vehicle_id: int | None = None,
    reparation_status: str | None = Query(default=None, alias="status"),
    technician: str | None = None,
    search: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    sort: str = "-created_at",
    _: Principal = Depends(get_current_principal),
    store: SQLiteReparationStore = Depends(get_reparations),
) -> PaginatedResponse[ReparationResponse]:
    """List reparations with filters, sorting and pagination."""
    filters = ReparationFilter(
        vehicle_id=vehicle_id,
        status=(
            parse_enum(ReparationStatus, reparation_status, "status")
            if reparation_status
            else None
        ),
        technician=technician,
        search=search,
        start_date=start_date,
        end_date=end_date,
    )
    request = page_request(
        page, limit, sort, get_settings().inventory.reparations_page_size
    )
    result = await store.list_reparations(filters, request)
    return paginated(result, ReparationResponse)


@router.post(
    "",
    response_model=ReparationResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_STOCK_ERRORS,
)
async def create_reparation(
    request: CreateReparationRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: CreateReparationUseCase = Depends(get_create_reparation_use_case),
) -> ReparationResponse:
    """Open a reparation and consume its parts from stock."""
    reparation = await use_case.execute(request, actor=principal.id)
    return use_case.to_response(reparation)


@router.get(
    "/{reparation_id}",
    response_model=ReparationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_reparation(
    reparation_id: int,
    _: Principal = Depends(get_current_principal),
    store: SQLiteReparationStore = Depends(get_reparations),
) -> ReparationResponse:
    """Get a reparation with its lines and totals."""
    reparation = await store.get_reparation(reparation_id)
    if reparation is None:
        raise ReparationNotFoundError(reparation_id)
    return ReparationResponse.model_validate(reparation)


@router.put(
    "/{reparation_id}",
    response_model=ReparationResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_reparation_status(
    reparation_id: int,
    request: UpdateReparationStatusRequest,
    _: Principal = Depends(get_current_principal),
    use_case: UpdateReparationStatusUseCase = Depends(
        get_update_reparation_status_use_case
    ),
) -> ReparationResponse:
    """Change status and/or end date without touching stock."""
    reparation = await use_case.execute(reparation_id, request)
    return use_case.to_response(reparation)


@router.put(
    "/{reparation_id}/full",
    response_model=ReparationResponse,
    responses=_STOCK_ERRORS,
)
async def update_reparation(
    reparation_id: int,
    request: UpdateReparationRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: UpdateReparationUseCase = Depends(get_update_reparation_use_case),
) -> ReparationResponse:
    """Replace header fields and lines, reconciling stock for changed parts."""
    reparation = await use_case.execute(reparation_id, request, actor=principal.id)
    return use_case.to_response(reparation)


@router.delete(
    "/{reparation_id}",
    response_model=DeleteResponse,
    responses=_STOCK_ERRORS,
)
async def delete_reparation(
    reparation_id: int,
    principal: Principal = Depends(get_current_principal),
    use_case: DeleteReparationUseCase = Depends(get_delete_reparation_use_case),
) -> DeleteResponse:
    """Delete a reparation and return its parts to stock."""
    await use_case.execute(reparation_id, actor=principal.id)
    return DeleteResponse(id=reparation_id, message="Reparation deleted")
