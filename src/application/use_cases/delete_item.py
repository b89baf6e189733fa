"""Delete Item Use Case -- refused while the item has history."""

from src.config import get_logger
from src.core.exceptions import ItemInUseError, ItemNotFoundError
from src.core.interfaces.item_store import IItemStore
from src.core.interfaces.ledger_store import ILedgerStore
from src.core.interfaces.reparation_store import IReparationStore

logger = get_logger(__name__)


class DeleteItemUseCase:
    """Delete an item that no ledger entry or reparation line references."""

    def __init__(
        self,
        item_store: IItemStore | None = None,
        ledger_store: ILedgerStore | None = None,
        reparation_store: IReparationStore | None = None,
    ):
        self._item_store = item_store
        self._ledger_store = ledger_store
        self._reparation_store = reparation_store

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from src.infrastructure.storage.sqlite import get_item_store

            self._item_store = await get_item_store()
        return self._item_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from src.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def _get_reparation_store(self) -> IReparationStore:
        if self._reparation_store is None:
            from src.infrastructure.storage.sqlite import get_reparation_store

            self._reparation_store = await get_reparation_store()
        return self._reparation_store

    async def execute(self, item_id: int) -> None:
        """Execute delete item use case."""
        item_store = await self._get_item_store()
        if await item_store.get_item(item_id) is None:
            raise ItemNotFoundError(item_id)

        references = await (await self._get_ledger_store()).count_for_item(item_id)
        references += await (await self._get_reparation_store()).count_item_usage(item_id)
        if references:
            raise ItemInUseError(item_id, references)

        if not await item_store.delete_item(item_id):
            raise ItemNotFoundError(item_id)
        logger.info("delete_item_complete", item_id=item_id)
