"""Reparation (repair job) domain entities."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class ReparationStatus(str, Enum):
    """Lifecycle states of a repair job."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ReparationStatus.COMPLETED, ReparationStatus.CANCELLED)

    def can_move_to(self, target: "ReparationStatus") -> bool:
        """Whether a status write from this state to ``target`` is allowed."""
        if target == self:
            return True
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[ReparationStatus, frozenset[ReparationStatus]] = {
    ReparationStatus.PENDING: frozenset(
        {
            ReparationStatus.IN_PROGRESS,
            ReparationStatus.COMPLETED,
            ReparationStatus.CANCELLED,
        }
    ),
    ReparationStatus.IN_PROGRESS: frozenset(
        {ReparationStatus.COMPLETED, ReparationStatus.CANCELLED}
    ),
    ReparationStatus.COMPLETED: frozenset(),
    ReparationStatus.CANCELLED: frozenset(),
}


class ReparationItem(BaseModel):
    """A part used on a job, with prices frozen at the moment of use."""

    id: int | None = None
    item_id: int
    quantity: int = Field(..., gt=0)
    buy_price: float = 0.0  # snapshot
    sell_price: float = 0.0  # snapshot
    total_price: float = 0.0

    @model_validator(mode="after")
    def compute_line(self) -> "ReparationItem":
        """total_price = sell_price * quantity."""
        self.total_price = self.sell_price * self.quantity
        return self

    @property
    def profit(self) -> float:
        return (self.sell_price - self.buy_price) * self.quantity


class ReparationService(BaseModel):
    """A catalog service performed on a job, with its price frozen."""

    id: int | None = None
    service_id: int
    price: float = 0.0  # snapshot
    notes: str = ""


class Reparation(BaseModel):
    """A repair job against one vehicle."""

    id: int | None = None
    vehicle_id: int
    description: str
    technician: str | None = None
    status: ReparationStatus = ReparationStatus.PENDING
    start_date: datetime = Field(default_factory=datetime.utcnow)
    end_date: datetime | None = None
    items: list[ReparationItem] = Field(default_factory=list)
    services: list[ReparationService] = Field(default_factory=list)
    labor_cost: float = Field(default=0.0, ge=0)
    parts_cost: float = 0.0
    services_cost: float = 0.0
    total_profit: float = 0.0
    total_cost: float = 0.0
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def compute_totals(self) -> "Reparation":
        """Derive all totals from the line snapshots."""
        return self.recompute_totals()

    def recompute_totals(self) -> "Reparation":
        for line in self.items:
            line.total_price = line.sell_price * line.quantity
        self.parts_cost = sum(line.total_price for line in self.items)
        self.total_profit = sum(line.profit for line in self.items)
        self.services_cost = sum(s.price for s in self.services)
        self.total_cost = self.parts_cost + self.services_cost + self.labor_cost
        return self

    def set_status(self, status: ReparationStatus, end_date: datetime | None = None) -> None:
        """Write a status; completing stamps end_date when none is recorded."""
        self.status = status
        if status == ReparationStatus.COMPLETED and self.end_date is None:
            self.end_date = end_date or datetime.utcnow()


@dataclass
class ReparationFilter:
    """Reparation query filters; ``None`` means unfiltered."""

    vehicle_id: int | None = None
    status: ReparationStatus | None = None
    technician: str | None = None
    search: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
