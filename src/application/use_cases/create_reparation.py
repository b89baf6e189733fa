"""Create Reparation Use Case -- open a job and consume its parts."""

from src.application.dto.requests import CreateReparationRequest
from src.application.dto.responses import ReparationResponse
from src.config import get_logger
from src.core.entities.reparation import Reparation
from src.core.services.reparation_lifecycle import (
    ItemLineRequest,
    ReparationDraft,
    ReparationLifecycleService,
    ServiceLineRequest,
)

logger = get_logger(__name__)


class CreateReparationUseCase:
    """Create a reparation; each part line becomes a reparation_use movement."""

    def __init__(self, lifecycle: ReparationLifecycleService | None = None):
        self._lifecycle = lifecycle

    async def _get_lifecycle(self) -> ReparationLifecycleService:
        if self._lifecycle is None:
            from src.application.services import get_reparation_lifecycle_service

            self._lifecycle = await get_reparation_lifecycle_service()
        return self._lifecycle

    async def execute(
        self, request: CreateReparationRequest, actor: str | None = None
    ) -> Reparation:
        """Execute create reparation use case."""
        logger.info(
            "create_reparation_started",
            vehicle_id=request.vehicle_id,
            items=len(request.items),
            services=len(request.services),
        )
        lifecycle = await self._get_lifecycle()
        return await lifecycle.create(
            ReparationDraft(
                vehicle_id=request.vehicle_id,
                description=request.description,
                technician=request.technician,
                labor_cost=request.labor_cost,
                notes=request.notes,
                items=[ItemLineRequest(line.item_id, line.quantity) for line in request.items],
                services=[
                    ServiceLineRequest(line.service_id, line.notes) for line in request.services
                ],
                created_by=actor,
            )
        )

    def to_response(self, reparation: Reparation) -> ReparationResponse:
        """Convert result to API response."""
        return ReparationResponse.model_validate(reparation)
