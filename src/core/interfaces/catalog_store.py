"""Abstract interfaces for catalog lookups and maintenance."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from src.core.entities.catalog import Category, Service, Supplier, Vehicle
from src.core.entities.pagination import Page, PageRequest

T = TypeVar("T")


class ICatalogStore(ABC, Generic[T]):
    """CRUD over one catalog table."""

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Insert a record and return it with its ID."""
        pass

    @abstractmethod
    async def get(self, entity_id: int) -> T | None:
        """Get a record by ID."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Persist all fields of an existing record."""
        pass

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        """Delete a record. Returns False if absent."""
        pass

    @abstractmethod
    async def list_all(self, page: PageRequest, search: str | None = None) -> Page[T]:
        """List records, optionally narrowed by a name search."""
        pass


class ICategoryStore(ICatalogStore[Category]):
    pass


class ISupplierStore(ICatalogStore[Supplier]):
    pass


class IServiceStore(ICatalogStore[Service]):
    pass


class IVehicleStore(ICatalogStore[Vehicle]):
    pass
