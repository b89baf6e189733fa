"""Update Reparation Use Cases -- full update and status-only update."""

from src.application.dto.requests import (
    UpdateReparationRequest,
    UpdateReparationStatusRequest,
)
from src.application.dto.responses import ReparationResponse
from src.config import get_logger
from src.core.entities.reparation import Reparation
from src.core.services.reparation_lifecycle import (
    ItemLineRequest,
    ReparationChanges,
    ReparationLifecycleService,
    ServiceLineRequest,
)

logger = get_logger(__name__)


class _ReparationUseCase:
    def __init__(self, lifecycle: ReparationLifecycleService | None = None):
        self._lifecycle = lifecycle

    async def _get_lifecycle(self) -> ReparationLifecycleService:
        if self._lifecycle is None:
            from src.application.services import get_reparation_lifecycle_service

            self._lifecycle = await get_reparation_lifecycle_service()
        return self._lifecycle

    def to_response(self, reparation: Reparation) -> ReparationResponse:
        """Convert result to API response."""
        return ReparationResponse.model_validate(reparation)


class UpdateReparationUseCase(_ReparationUseCase):
    """
    Full update: header fields plus optional wholesale line replacement.

    Replaced part lines are returned to stock before the new lines are
    consumed, so a line kept at the same quantity nets to zero.
    """

    async def execute(
        self,
        reparation_id: int,
        request: UpdateReparationRequest,
        actor: str | None = None,
    ) -> Reparation:
        """Execute full update use case."""
        logger.info(
            "update_reparation_started",
            reparation_id=reparation_id,
            replace_items=request.items is not None,
            replace_services=request.services is not None,
        )
        items = None
        if request.items is not None:
            items = [ItemLineRequest(line.item_id, line.quantity) for line in request.items]
        services = None
        if request.services is not None:
            services = [
                ServiceLineRequest(line.service_id, line.notes) for line in request.services
            ]

        lifecycle = await self._get_lifecycle()
        return await lifecycle.update_full(
            reparation_id,
            ReparationChanges(
                vehicle_id=request.vehicle_id,
                description=request.description,
                technician=request.technician,
                status=request.status,
                start_date=request.start_date,
                end_date=request.end_date,
                labor_cost=request.labor_cost,
                notes=request.notes,
                items=items,
                services=services,
            ),
            actor=actor,
        )


class UpdateReparationStatusUseCase(_ReparationUseCase):
    """Status and end date only; stock is never touched."""

    async def execute(
        self, reparation_id: int, request: UpdateReparationStatusRequest
    ) -> Reparation:
        """Execute status update use case."""
        lifecycle = await self._get_lifecycle()
        return await lifecycle.update_status(
            reparation_id, request.status, end_date=request.end_date
        )
