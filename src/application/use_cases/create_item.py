"""Create Item Use Case -- new item, opening stock recorded in the ledger."""

from dataclasses import dataclass

from src.application.dto.requests import CreateItemRequest
from src.application.dto.responses import ItemResponse
from src.config import get_logger, get_settings
from src.core.entities.item import Item
from src.core.entities.stock_transaction import (
    MovementContext,
    StockTransaction,
    TransactionType,
)
from src.core.exceptions import CategoryNotFoundError, SupplierNotFoundError
from src.core.interfaces.catalog_store import ICategoryStore, ISupplierStore
from src.core.interfaces.item_store import IItemStore
from src.core.services.stock_mutation import StockMutationService

logger = get_logger(__name__)


@dataclass
class CreateItemResult:
    """Result of creating an item."""

    item: Item
    opening_transaction: StockTransaction | None = None


class CreateItemUseCase:
    """Create an item at zero stock, then apply the opening quantity as an adjustment."""

    def __init__(
        self,
        item_store: IItemStore | None = None,
        category_store: ICategoryStore | None = None,
        supplier_store: ISupplierStore | None = None,
        stock: StockMutationService | None = None,
    ):
        self._item_store = item_store
        self._category_store = category_store
        self._supplier_store = supplier_store
        self._stock = stock
        self._custom_item_store = item_store

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from src.infrastructure.storage.sqlite import get_item_store

            self._item_store = await get_item_store()
        return self._item_store

    async def _get_category_store(self) -> ICategoryStore:
        if self._category_store is None:
            from src.infrastructure.storage.sqlite import get_category_store

            self._category_store = await get_category_store()
        return self._category_store

    async def _get_supplier_store(self) -> ISupplierStore:
        if self._supplier_store is None:
            from src.infrastructure.storage.sqlite import get_supplier_store

            self._supplier_store = await get_supplier_store()
        return self._supplier_store

    async def _get_stock(self) -> StockMutationService:
        if self._stock is None:
            from src.application.services import get_stock_mutation_service

            self._stock = await get_stock_mutation_service(self._custom_item_store)
        return self._stock

    async def execute(
        self, request: CreateItemRequest, actor: str | None = None
    ) -> CreateItemResult:
        """Execute create item use case."""
        logger.info("create_item_started", name=request.name, quantity=request.quantity)

        if request.category_id is not None:
            if await (await self._get_category_store()).get(request.category_id) is None:
                raise CategoryNotFoundError(request.category_id)
        if request.supplier_id is not None:
            if await (await self._get_supplier_store()).get(request.supplier_id) is None:
                raise SupplierNotFoundError(request.supplier_id)

        threshold = request.threshold
        if threshold is None:
            threshold = get_settings().inventory.default_threshold

        item_store = await self._get_item_store()
        item = await item_store.create_item(
            Item(
                name=request.name,
                description=request.description,
                quantity=0,
                buy_price=request.buy_price,
                sell_price=request.sell_price,
                category_id=request.category_id,
                supplier_id=request.supplier_id,
                threshold=threshold,
                item_code=request.item_code,
                location=request.location,
                notes=request.notes,
            )
        )

        opening = None
        if request.quantity > 0:
            stock = await self._get_stock()
            try:
                result = await stock.apply_movement(
                    item.id,
                    TransactionType.ADJUSTMENT,
                    request.quantity,
                    MovementContext(
                        unit_price=item.buy_price,
                        notes="Initial stock",
                        created_by=actor,
                    ),
                )
            except Exception:
                await item_store.delete_item(item.id)
                raise
            item = result.item
            opening = result.transaction

        logger.info(
            "create_item_complete",
            item_id=item.id,
            item_code=item.item_code,
            quantity=item.quantity,
            status=item.status.value,
        )
        return CreateItemResult(item=item, opening_transaction=opening)

    def to_response(self, result: CreateItemResult) -> ItemResponse:
        """Convert result to API response."""
        return ItemResponse.model_validate(result.item)
