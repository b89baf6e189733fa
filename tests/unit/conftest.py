"""In-memory stores for service and use case tests.

These keep the unit tests free of SQLite while honouring the store
contracts the services rely on.
"""

from collections.abc import Callable

import pytest

from src.core.entities.catalog import Category, Service, Supplier, Vehicle
from src.core.entities.item import Item, ItemFilter, derive_status
from src.core.entities.pagination import Page, PageRequest
from src.core.entities.reparation import Reparation, ReparationFilter
from src.core.entities.stock_transaction import (
    MovementContext,
    StockTransaction,
    TransactionType,
)
from src.core.exceptions import InsufficientStockError, ItemNotFoundError
from src.core.interfaces.catalog_store import (
    ICategoryStore,
    IServiceStore,
    ISupplierStore,
    IVehicleStore,
)
from src.core.interfaces.item_store import IItemStore
from src.core.interfaces.reparation_store import IReparationStore
from src.core.services.reparation_lifecycle import ReparationLifecycleService
from src.core.services.stock_mutation import StockMutationService


class InMemoryItemStore(IItemStore):
    """Items plus the ledger that ``apply_movement`` appends to.

    ``fail_when`` may be set to a predicate over (item_id, type); a matching
    movement raises ``RuntimeError`` before anything changes.
    """

    def __init__(self) -> None:
        self.items: dict[int, Item] = {}
        self.ledger: list[StockTransaction] = []
        self.fail_when: Callable[[int, TransactionType], bool] | None = None
        self._next_id = 1

    def add(self, **fields) -> Item:
        item = Item(id=self._next_id, **fields)
        self.items[item.id] = item
        self._next_id += 1
        return item.model_copy(deep=True)

    def set_quantity(self, item_id: int, quantity: int) -> None:
        """Simulate another writer changing stock behind the service's back."""
        item = self.items[item_id]
        item.quantity = quantity
        item.refresh_status()

    def ledger_for(self, item_id: int) -> list[StockTransaction]:
        return [tx for tx in self.ledger if tx.item_id == item_id]

    async def create_item(self, item: Item) -> Item:
        item = item.model_copy(deep=True)
        item.id = self._next_id
        self._next_id += 1
        self.items[item.id] = item
        return item.model_copy(deep=True)

    async def get_item(self, item_id: int) -> Item | None:
        item = self.items.get(item_id)
        return item.model_copy(deep=True) if item else None

    async def update_item(self, item: Item) -> Item:
        if item.id not in self.items:
            raise ItemNotFoundError(item.id)
        stored = item.model_copy(deep=True)
        stored.quantity = self.items[item.id].quantity
        stored.refresh_status()
        self.items[item.id] = stored
        return stored.model_copy(deep=True)

    async def delete_item(self, item_id: int) -> bool:
        return self.items.pop(item_id, None) is not None

    async def list_items(self, filters: ItemFilter, page: PageRequest) -> Page[Item]:
        items = list(self.items.values())
        return Page(items=items, total=len(items), page=page.page, limit=page.limit)

    async def apply_movement(
        self,
        item_id: int,
        transaction_type: TransactionType,
        magnitude: int,
        unit_price: float,
        context: MovementContext,
    ) -> tuple[Item, StockTransaction]:
        if self.fail_when and self.fail_when(item_id, transaction_type):
            raise RuntimeError(f"store failure on item {item_id}")
        item = self.items.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        delta = transaction_type.signed(magnitude)
        if item.quantity + delta < 0:
            raise InsufficientStockError(
                item_id=item_id,
                requested=magnitude,
                available=item.quantity,
                item_name=item.name,
            )
        before = item.quantity
        item.quantity = before + delta
        item.status = derive_status(item.quantity, item.threshold)
        transaction = StockTransaction(
            id=len(self.ledger) + 1,
            item_id=item_id,
            type=transaction_type,
            quantity=magnitude,
            quantity_before=before,
            quantity_after=item.quantity,
            unit_price=unit_price,
            reparation_id=context.reparation_id,
            supplier_id=context.supplier_id,
            reference=context.reference,
            notes=context.notes,
            created_by=context.created_by,
        )
        self.ledger.append(transaction)
        return item.model_copy(deep=True), transaction


class InMemoryReparationStore(IReparationStore):
    def __init__(self) -> None:
        self.reparations: dict[int, Reparation] = {}
        self.fail_update = False
        self.fail_delete = False
        self._next_id = 1

    async def create_reparation(self, reparation: Reparation) -> Reparation:
        reparation = reparation.model_copy(deep=True)
        reparation.id = self._next_id
        self._next_id += 1
        self.reparations[reparation.id] = reparation
        return reparation.model_copy(deep=True)

    async def get_reparation(self, reparation_id: int) -> Reparation | None:
        reparation = self.reparations.get(reparation_id)
        return reparation.model_copy(deep=True) if reparation else None

    async def update_reparation(self, reparation: Reparation) -> Reparation:
        if self.fail_update:
            raise RuntimeError("update failed")
        self.reparations[reparation.id] = reparation.model_copy(deep=True)
        return reparation.model_copy(deep=True)

    async def delete_reparation(self, reparation_id: int) -> bool:
        if self.fail_delete:
            raise RuntimeError("delete failed")
        return self.reparations.pop(reparation_id, None) is not None

    async def list_reparations(
        self, filters: ReparationFilter, page: PageRequest
    ) -> Page[Reparation]:
        items = list(self.reparations.values())
        return Page(items=items, total=len(items), page=page.page, limit=page.limit)

    async def count_item_usage(self, item_id: int) -> int:
        return sum(
            1
            for reparation in self.reparations.values()
            for line in reparation.items
            if line.item_id == item_id
        )


class _InMemoryCatalog:
    def __init__(self) -> None:
        self.records: dict[int, object] = {}
        self._next_id = 1

    def add(self, entity):
        entity.id = self._next_id
        self._next_id += 1
        self.records[entity.id] = entity
        return entity

    async def create(self, entity):
        entity = entity.model_copy()
        return self.add(entity)

    async def get(self, entity_id: int):
        return self.records.get(entity_id)

    async def update(self, entity):
        self.records[entity.id] = entity
        return entity

    async def delete(self, entity_id: int) -> bool:
        return self.records.pop(entity_id, None) is not None

    async def list_all(self, page: PageRequest, search: str | None = None) -> Page:
        items = list(self.records.values())
        return Page(items=items, total=len(items), page=page.page, limit=page.limit)


class InMemoryVehicleStore(_InMemoryCatalog, IVehicleStore):
    pass


class InMemoryServiceStore(_InMemoryCatalog, IServiceStore):
    pass


class InMemoryCategoryStore(_InMemoryCatalog, ICategoryStore):
    pass


class InMemorySupplierStore(_InMemoryCatalog, ISupplierStore):
    pass


@pytest.fixture
def item_store() -> InMemoryItemStore:
    return InMemoryItemStore()


@pytest.fixture
def reparation_store() -> InMemoryReparationStore:
    return InMemoryReparationStore()


@pytest.fixture
def vehicle_store() -> InMemoryVehicleStore:
    store = InMemoryVehicleStore()
    store.add(
        Vehicle(make="Renault", model="Clio", year=2015, owner_name="A. Driver")
    )
    return store


@pytest.fixture
def service_store() -> InMemoryServiceStore:
    store = InMemoryServiceStore()
    store.add(Service(name="Oil change", price=25.0))
    return store


@pytest.fixture
def category_store() -> InMemoryCategoryStore:
    store = InMemoryCategoryStore()
    store.add(Category(name="Brakes"))
    return store


@pytest.fixture
def supplier_store() -> InMemorySupplierStore:
    store = InMemorySupplierStore()
    store.add(Supplier(name="Parts Co"))
    return store


@pytest.fixture
def stock(item_store: InMemoryItemStore) -> StockMutationService:
    return StockMutationService(item_store)


@pytest.fixture
def lifecycle(
    reparation_store, item_store, vehicle_store, service_store, stock
) -> ReparationLifecycleService:
    return ReparationLifecycleService(
        reparation_store=reparation_store,
        item_store=item_store,
        vehicle_store=vehicle_store,
        service_store=service_store,
        stock=stock,
    )
