"""Update Item Use Case -- descriptive fields, prices and threshold."""

from src.application.dto.requests import UpdateItemRequest
from src.application.dto.responses import ItemResponse
from src.config import get_logger
from src.core.entities.item import Item
from src.core.exceptions import (
    CategoryNotFoundError,
    ItemNotFoundError,
    SupplierNotFoundError,
)
from src.core.interfaces.catalog_store import ICategoryStore, ISupplierStore
from src.core.interfaces.item_store import IItemStore

logger = get_logger(__name__)

# An explicit null on these keeps the stored value.
REQUIRED_FIELDS = frozenset({"name", "buy_price", "sell_price", "threshold", "item_code"})


class UpdateItemUseCase:
    """Apply a partial item update; status is re-derived from the new threshold."""

    def __init__(
        self,
        item_store: IItemStore | None = None,
        category_store: ICategoryStore | None = None,
        supplier_store: ISupplierStore | None = None,
    ):
        self._item_store = item_store
        self._category_store = category_store
        self._supplier_store = supplier_store

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

    async def execute(self, item_id: int, request: UpdateItemRequest) -> Item:
        """Execute update item use case."""
        item_store = await self._get_item_store()
        item = await item_store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)

        changes = {
            field: value
            for field, value in request.model_dump(exclude_unset=True).items()
            if value is not None or field not in REQUIRED_FIELDS
        }
        if changes.get("category_id") is not None:
            if await (await self._get_category_store()).get(changes["category_id"]) is None:
                raise CategoryNotFoundError(changes["category_id"])
        if changes.get("supplier_id") is not None:
            if await (await self._get_supplier_store()).get(changes["supplier_id"]) is None:
                raise SupplierNotFoundError(changes["supplier_id"])

        for field, value in changes.items():
            setattr(item, field, value)
        item.refresh_status()

        item = await item_store.update_item(item)
        logger.info(
            "update_item_complete",
            item_id=item_id,
            fields=sorted(changes),
            status=item.status.value,
        )
        return item

    def to_response(self, item: Item) -> ItemResponse:
        """Convert result to API response."""
        return ItemResponse.model_validate(item)
