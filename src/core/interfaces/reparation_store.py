"""Abstract interface for reparation storage."""

from abc import ABC, abstractmethod

from src.core.entities.pagination import Page, PageRequest
from src.core.entities.reparation import Reparation, ReparationFilter


class IReparationStore(ABC):
    """Interface for reparation persistence (header plus line snapshots)."""

    @abstractmethod
    async def create_reparation(self, reparation: Reparation) -> Reparation:
        """Create a reparation with its item and service lines."""
        pass

    @abstractmethod
    async def get_reparation(self, reparation_id: int) -> Reparation | None:
        """Get a reparation with its lines."""
        pass

    @abstractmethod
    async def update_reparation(self, reparation: Reparation) -> Reparation:
        """Persist header fields and replace the line sets wholesale."""
        pass

    @abstractmethod
    async def delete_reparation(self, reparation_id: int) -> bool:
        """Delete a reparation and its lines. Returns False if absent."""
        pass

    @abstractmethod
    async def list_reparations(
        self, filters: ReparationFilter, page: PageRequest
    ) -> Page[Reparation]:
        """List reparations with filtering, sorting and pagination."""
        pass

    @abstractmethod
    async def count_item_usage(self, item_id: int) -> int:
        """Number of reparation lines referencing an item."""
        pass
