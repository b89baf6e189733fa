"""Catalog entities looked up by the stock workflows."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Category(BaseModel):
    """Item category."""

    id: int | None = None
    name: str
    description: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Supplier(BaseModel):
    """Parts supplier."""

    id: int | None = None
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ServiceCategory(str, Enum):
    MAINTENANCE = "maintenance"
    REPAIR = "repair"
    DIAGNOSTIC = "diagnostic"
    BODYWORK = "bodywork"
    OTHER = "other"


class ServiceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Service(BaseModel):
    """A billable workshop service (oil change, diagnostic, ...)."""

    id: int | None = None
    name: str
    description: str | None = None
    price: float = Field(default=0.0, ge=0)
    duration: float | None = None  # hours
    category: ServiceCategory = ServiceCategory.MAINTENANCE
    status: ServiceStatus = ServiceStatus.ACTIVE
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Vehicle(BaseModel):
    """A customer's vehicle."""

    id: int | None = None
    make: str
    model: str
    year: int
    license_plate: str | None = None
    vin: str | None = None
    owner_name: str
    owner_phone: str | None = None
    owner_email: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def label(self) -> str:
        return f"{self.make} {self.model}"
