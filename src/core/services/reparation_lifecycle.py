"""
Reparation lifecycle service.

Owns creation, full update, status update and deletion of repair jobs and
the stock movements they imply. Every line is validated before the first
movement; a movement that fails mid-batch is compensated in reverse order
so the batch either lands whole or leaves stock as it found it.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.config import get_logger
from src.core.entities.catalog import Vehicle
from src.core.entities.reparation import (
    Reparation,
    ReparationItem,
    ReparationService,
    ReparationStatus,
)
from src.core.entities.stock_transaction import MovementContext, TransactionType
from src.core.exceptions import (
    InsufficientStockError,
    InvalidArgumentError,
    InvalidStatusTransitionError,
    ItemNotFoundError,
    NotFoundError,
    PartialFailureError,
    ReparationNotFoundError,
    ServiceNotFoundError,
    VehicleNotFoundError,
)
from src.core.interfaces.catalog_store import IServiceStore, IVehicleStore
from src.core.interfaces.item_store import IItemStore
from src.core.interfaces.reparation_store import IReparationStore
from src.core.services.stock_mutation import StockMutationService
from src.core.validators import parse_enum, require_positive_int

logger = get_logger(__name__)

NOTE_RETURN_ON_UPDATE = "Returned due to reparation update"
NOTE_USE_ON_UPDATE = "Used in updated reparation"
NOTE_RETURN_ON_DELETE = "Returned due to reparation deletion"


@dataclass
class ItemLineRequest:
    """A part requested for a job."""

    item_id: int
    quantity: int


@dataclass
class ServiceLineRequest:
    """A catalog service requested for a job."""

    service_id: int
    notes: str = ""


@dataclass
class ReparationDraft:
    """Everything needed to open a new job."""

    vehicle_id: int
    description: str
    technician: str | None = None
    labor_cost: float = 0.0
    notes: str | None = None
    items: list[ItemLineRequest] = field(default_factory=list)
    services: list[ServiceLineRequest] = field(default_factory=list)
    created_by: str | None = None


@dataclass
class ReparationChanges:
    """Partial edit of a job; ``None`` leaves a field as is.

    ``items`` and ``services`` replace the whole line set when given, an
    empty list included.
    """

    vehicle_id: int | None = None
    description: str | None = None
    technician: str | None = None
    status: ReparationStatus | str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    labor_cost: float | None = None
    notes: str | None = None
    items: list[ItemLineRequest] | None = None
    services: list[ServiceLineRequest] | None = None


@dataclass
class PlannedMovement:
    """One movement of a batch, before or after it is applied."""

    item_id: int
    type: TransactionType
    quantity: int
    unit_price: float
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "type": self.type.value,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
        }


_OPPOSITE = {
    TransactionType.REPARATION_USE: TransactionType.REPARATION_RETURN,
    TransactionType.REPARATION_RETURN: TransactionType.REPARATION_USE,
}


class ReparationLifecycleService:
    """
    Coordinates reparations with the stock they consume.

    Pure service -- depends only on store interfaces and the stock
    mutation service.
    """

    def __init__(
        self,
        reparation_store: IReparationStore,
        item_store: IItemStore,
        vehicle_store: IVehicleStore,
        service_store: IServiceStore,
        stock: StockMutationService,
    ) -> None:
        self._reparations = reparation_store
        self._items = item_store
        self._vehicles = vehicle_store
        self._services = service_store
        self._stock = stock

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get(self, reparation_id: int) -> Reparation:
        reparation = await self._reparations.get_reparation(reparation_id)
        if reparation is None:
            raise ReparationNotFoundError(reparation_id)
        return reparation

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create(self, draft: ReparationDraft) -> Reparation:
        """
        Open a job and consume its parts.

        Raises:
            VehicleNotFoundError, ItemNotFoundError, ServiceNotFoundError,
            InsufficientStockError, InvalidArgumentError: before any change.
            PartialFailureError: a movement failed and stock was restored
                (or could not be).
        """
        vehicle = await self._get_vehicle(draft.vehicle_id)
        items = await self._prepare_items(draft.items, credit={})
        services = await self._prepare_services(draft.services)

        reparation = Reparation(
            vehicle_id=vehicle.id,
            description=draft.description,
            technician=draft.technician,
            labor_cost=draft.labor_cost,
            notes=draft.notes,
            items=items,
            services=services,
            created_by=draft.created_by,
        )
        reparation = await self._reparations.create_reparation(reparation)

        movements = [
            PlannedMovement(
                item_id=line.item_id,
                type=TransactionType.REPARATION_USE,
                quantity=line.quantity,
                unit_price=line.sell_price,
                notes=f"Used in reparation for {vehicle.label}",
            )
            for line in items
        ]
        try:
            await self._run_batch(
                "create_reparation", reparation.id, movements, draft.created_by
            )
        except Exception:
            await self._reparations.delete_reparation(reparation.id)
            raise

        logger.info(
            "reparation_created",
            reparation_id=reparation.id,
            vehicle_id=vehicle.id,
            items=len(items),
            services=len(services),
            total_cost=reparation.total_cost,
        )
        return reparation

    async def update_full(
        self,
        reparation_id: int,
        changes: ReparationChanges,
        actor: str | None = None,
    ) -> Reparation:
        """
        Edit header fields and optionally replace the line sets.

        A provided ``items`` list returns every old line, then consumes
        every new line. New lines are validated against the stock that
        will exist after the returns, before any movement runs.
        """
        reparation = await self.get(reparation_id)

        new_status = None
        if changes.status is not None:
            new_status = parse_enum(ReparationStatus, changes.status, "status")
            self._check_transition(reparation.status, new_status)

        replacing_lines = changes.items is not None or changes.services is not None
        if replacing_lines and reparation.status.is_terminal:
            raise InvalidArgumentError(
                "items",
                f"cannot change lines of a {reparation.status.value} reparation",
            )

        if changes.vehicle_id is not None:
            await self._get_vehicle(changes.vehicle_id)
            reparation.vehicle_id = changes.vehicle_id

        old_items = list(reparation.items)
        new_items = None
        if changes.items is not None:
            credit: dict[int, int] = defaultdict(int)
            for line in old_items:
                credit[line.item_id] += line.quantity
            new_items = await self._prepare_items(changes.items, credit=credit)
        new_services = None
        if changes.services is not None:
            new_services = await self._prepare_services(changes.services)

        self._apply_header(reparation, changes, new_status)

        movements: list[PlannedMovement] = []
        if new_items is not None:
            movements.extend(
                PlannedMovement(
                    item_id=line.item_id,
                    type=TransactionType.REPARATION_RETURN,
                    quantity=line.quantity,
                    unit_price=line.sell_price,
                    notes=NOTE_RETURN_ON_UPDATE,
                )
                for line in old_items
            )
            movements.extend(
                PlannedMovement(
                    item_id=line.item_id,
                    type=TransactionType.REPARATION_USE,
                    quantity=line.quantity,
                    unit_price=line.sell_price,
                    notes=NOTE_USE_ON_UPDATE,
                )
                for line in new_items
            )
            reparation.items = new_items
        if new_services is not None:
            reparation.services = new_services

        applied = await self._run_batch(
            "update_reparation", reparation_id, movements, actor
        )

        reparation.updated_at = datetime.utcnow()
        reparation.recompute_totals()
        try:
            saved = await self._reparations.update_reparation(reparation)
        except Exception as e:
            uncompensated = await self._compensate(reparation_id, applied, actor)
            raise PartialFailureError(
                "update_reparation",
                str(e),
                applied=[m.to_dict() for m in applied],
                uncompensated=[m.to_dict() for m in uncompensated],
            ) from e

        logger.info(
            "reparation_updated",
            reparation_id=reparation_id,
            lines_replaced=new_items is not None,
            services_replaced=new_services is not None,
            movements=len(applied),
            status=saved.status.value,
        )
        return saved

    async def update_status(
        self,
        reparation_id: int,
        status: ReparationStatus | str | None,
        end_date: datetime | None = None,
    ) -> Reparation:
        """Write status and/or end date. Stock is never touched."""
        reparation = await self.get(reparation_id)
        previous = reparation.status

        if status is not None:
            target = parse_enum(ReparationStatus, status, "status")
            self._check_transition(previous, target)
            if end_date is not None:
                reparation.end_date = end_date
            reparation.set_status(target)
        elif end_date is not None:
            reparation.end_date = end_date

        reparation.updated_at = datetime.utcnow()
        saved = await self._reparations.update_reparation(reparation)

        logger.info(
            "reparation_status_updated",
            reparation_id=reparation_id,
            previous=previous.value,
            status=saved.status.value,
        )
        return saved

    async def delete(self, reparation_id: int, actor: str | None = None) -> None:
        """Return every recorded part to stock, then remove the job."""
        reparation = await self.get(reparation_id)

        movements = [
            PlannedMovement(
                item_id=line.item_id,
                type=TransactionType.REPARATION_RETURN,
                quantity=line.quantity,
                unit_price=line.sell_price,
                notes=NOTE_RETURN_ON_DELETE,
            )
            for line in reparation.items
        ]
        applied = await self._run_batch(
            "delete_reparation", reparation_id, movements, actor
        )

        try:
            await self._reparations.delete_reparation(reparation_id)
        except Exception as e:
            uncompensated = await self._compensate(reparation_id, applied, actor)
            raise PartialFailureError(
                "delete_reparation",
                str(e),
                applied=[m.to_dict() for m in applied],
                uncompensated=[m.to_dict() for m in uncompensated],
            ) from e

        logger.info(
            "reparation_deleted",
            reparation_id=reparation_id,
            returned_lines=len(applied),
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    async def _get_vehicle(self, vehicle_id: int) -> Vehicle:
        vehicle = await self._vehicles.get(vehicle_id)
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)
        return vehicle

    @staticmethod
    def _check_transition(current: ReparationStatus, target: ReparationStatus) -> None:
        if not current.can_move_to(target):
            raise InvalidStatusTransitionError(current.value, target.value)

    async def _prepare_items(
        self,
        requests: list[ItemLineRequest],
        credit: dict[int, int],
    ) -> list[ReparationItem]:
        """
        Validate requested parts and snapshot their prices.

        ``credit`` holds quantities that will be returned to stock before
        these lines are consumed. Quantities are aggregated per item, so
        two lines on the same part are checked together.
        """
        requested: dict[int, int] = defaultdict(int)
        for line in requests:
            require_positive_int(line.quantity, "items.quantity")
            requested[line.item_id] += line.quantity

        snapshots = {}
        for item_id, total in requested.items():
            item = await self._items.get_item(item_id)
            if item is None:
                raise ItemNotFoundError(item_id)
            available = item.quantity + credit.get(item_id, 0)
            if total > available:
                raise InsufficientStockError(
                    item_id=item_id,
                    requested=total,
                    available=available,
                    item_name=item.name,
                )
            snapshots[item_id] = item

        return [
            ReparationItem(
                item_id=line.item_id,
                quantity=line.quantity,
                buy_price=snapshots[line.item_id].buy_price,
                sell_price=snapshots[line.item_id].sell_price,
            )
            for line in requests
        ]

    async def _prepare_services(
        self, requests: list[ServiceLineRequest]
    ) -> list[ReparationService]:
        prepared = []
        for line in requests:
            service = await self._services.get(line.service_id)
            if service is None:
                raise ServiceNotFoundError(line.service_id)
            prepared.append(
                ReparationService(
                    service_id=service.id,
                    price=service.price,
                    notes=line.notes or "",
                )
            )
        return prepared

    @staticmethod
    def _apply_header(
        reparation: Reparation,
        changes: ReparationChanges,
        status: ReparationStatus | None,
    ) -> None:
        if changes.description is not None:
            reparation.description = changes.description
        if changes.technician is not None:
            reparation.technician = changes.technician
        if changes.start_date is not None:
            reparation.start_date = changes.start_date
        if changes.end_date is not None:
            reparation.end_date = changes.end_date
        if changes.labor_cost is not None:
            if changes.labor_cost < 0:
                raise InvalidArgumentError(
                    "labor_cost", "must be >= 0", changes.labor_cost
                )
            reparation.labor_cost = changes.labor_cost
        if changes.notes is not None:
            reparation.notes = changes.notes
        if status is not None:
            reparation.set_status(status)

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    async def _run_batch(
        self,
        operation: str,
        reparation_id: int,
        movements: list[PlannedMovement],
        actor: str | None,
    ) -> list[PlannedMovement]:
        """
        Apply movements in order; undo the applied ones if any fails.

        Raises:
            InsufficientStockError, NotFoundError: re-raised after a clean
                compensation.
            PartialFailureError: any other failure, or a compensation that
                itself failed.
        """
        applied: list[PlannedMovement] = []
        for movement in movements:
            try:
                await self._stock.apply_movement(
                    movement.item_id,
                    movement.type,
                    movement.quantity,
                    MovementContext(
                        unit_price=movement.unit_price,
                        notes=movement.notes,
                        created_by=actor,
                        reparation_id=reparation_id,
                    ),
                )
            except Exception as e:
                logger.warning(
                    "reparation_batch_failed",
                    operation=operation,
                    reparation_id=reparation_id,
                    item_id=movement.item_id,
                    applied=len(applied),
                    error=str(e),
                )
                uncompensated = await self._compensate(reparation_id, applied, actor)
                if not uncompensated and isinstance(
                    e, (InsufficientStockError, NotFoundError)
                ):
                    raise
                raise PartialFailureError(
                    operation,
                    str(e),
                    applied=[m.to_dict() for m in applied],
                    uncompensated=[m.to_dict() for m in uncompensated],
                ) from e
            applied.append(movement)
        return applied

    async def _compensate(
        self,
        reparation_id: int,
        applied: list[PlannedMovement],
        actor: str | None,
    ) -> list[PlannedMovement]:
        """Reverse applied movements, newest first. Returns the ones that failed."""
        uncompensated = []
        for movement in reversed(applied):
            try:
                await self._stock.apply_movement(
                    movement.item_id,
                    _OPPOSITE[movement.type],
                    movement.quantity,
                    MovementContext(
                        unit_price=movement.unit_price,
                        notes="Compensation for failed reparation operation",
                        created_by=actor,
                        reparation_id=reparation_id,
                    ),
                )
            except Exception as e:
                logger.error(
                    "reparation_compensation_failed",
                    reparation_id=reparation_id,
                    item_id=movement.item_id,
                    type=movement.type.value,
                    quantity=movement.quantity,
                    error=str(e),
                )
                uncompensated.append(movement)
        return uncompensated
