"""Delete Reparation Use Case -- return parts to stock, then remove the job."""

from src.config import get_logger
from src.core.services.reparation_lifecycle import ReparationLifecycleService

logger = get_logger(__name__)


class DeleteReparationUseCase:
    """Delete a reparation with a reparation_return movement per part line."""

    def __init__(self, lifecycle: ReparationLifecycleService | None = None):
        self._lifecycle = lifecycle

    async def _get_lifecycle(self) -> ReparationLifecycleService:
        if self._lifecycle is None:
            from src.application.services import get_reparation_lifecycle_service

            self._lifecycle = await get_reparation_lifecycle_service()
        return self._lifecycle

    async def execute(self, reparation_id: int, actor: str | None = None) -> None:
        """Execute delete reparation use case."""
        logger.info("delete_reparation_started", reparation_id=reparation_id)
        lifecycle = await self._get_lifecycle()
        await lifecycle.delete(reparation_id, actor=actor)
