"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Enumerated fields (transaction type, reparation status) are accepted as
plain strings and parsed by the core, so an unknown value surfaces as an
INVALID_ARGUMENT error listing the allowed values.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# --- Items ---


class CreateItemRequest(BaseModel):
    """Request to create an inventory item.

    A non-zero ``quantity`` is recorded as an initial adjustment movement.
    """

    name: str = Field(..., min_length=1, description="Item name", examples=["Brake pads"])
    description: str | None = Field(default=None, description="Free-text description")
    quantity: int = Field(default=0, ge=0, description="Opening stock")
    buy_price: float = Field(default=0.0, ge=0, description="Purchase price per unit")
    sell_price: float = Field(default=0.0, ge=0, description="Sale price per unit")
    category_id: int | None = Field(default=None, description="Category ID")
    supplier_id: int | None = Field(default=None, description="Supplier ID")
    threshold: int | None = Field(
        default=None,
        ge=0,
        description="Low-stock threshold (defaults to the configured value)",
    )
    item_code: str | None = Field(
        default=None,
        description="Unique code; generated as ITEM-XXX-NNNNNN when omitted",
        examples=["ITEM-BRA-004211"],
    )
    location: str | None = Field(default=None, description="Shelf or bin")
    notes: str | None = Field(default=None, description="Additional notes")


class UpdateItemRequest(BaseModel):
    """Partial item update. Quantity is not editable here."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    buy_price: float | None = Field(default=None, ge=0)
    sell_price: float | None = Field(default=None, ge=0)
    category_id: int | None = None
    supplier_id: int | None = None
    threshold: int | None = Field(default=None, ge=0)
    item_code: str | None = None
    location: str | None = None
    notes: str | None = None


# --- Stock transactions ---


class CreateStockTransactionRequest(BaseModel):
    """Request to record a manual stock movement."""

    item_id: int = Field(..., description="Item to move")
    type: str = Field(
        ...,
        description="purchase, adjustment, damage or return_to_supplier",
        examples=["purchase"],
    )
    quantity: int = Field(..., description="Unsigned quantity, must be > 0")
    unit_price: float | None = Field(
        default=None,
        ge=0,
        description="Defaults to buy price for purchases, sell price otherwise",
    )
    supplier_id: int | None = Field(default=None, description="Supplier for purchases/returns")
    reference: str = Field(default="", description="PO, invoice or delivery reference")
    notes: str = Field(default="", description="Additional notes")


# --- Reparations ---


class ReparationItemLine(BaseModel):
    """A part to consume on a job."""

    item_id: int
    quantity: int = Field(..., description="Quantity, must be > 0")


class ReparationServiceLine(BaseModel):
    """A catalog service performed on a job."""

    service_id: int
    notes: str = ""


class CreateReparationRequest(BaseModel):
    """Request to open a reparation and consume its parts."""

    vehicle_id: int = Field(..., description="Vehicle being repaired")
    description: str = Field(..., min_length=1, description="Work description")
    technician: str | None = Field(default=None, description="Assigned technician")
    labor_cost: float = Field(default=0.0, ge=0, description="Labor cost")
    notes: str | None = Field(default=None, description="Additional notes")
    items: list[ReparationItemLine] = Field(default_factory=list)
    services: list[ReparationServiceLine] = Field(default_factory=list)


class UpdateReparationRequest(BaseModel):
    """Full update of a reparation.

    Omitted fields are kept. ``items`` / ``services`` replace the whole set
    when present, an empty list included.
    """

    vehicle_id: int | None = None
    description: str | None = Field(default=None, min_length=1)
    technician: str | None = None
    status: str | None = Field(default=None, examples=["in_progress"])
    start_date: datetime | None = None
    end_date: datetime | None = None
    labor_cost: float | None = Field(default=None, ge=0)
    notes: str | None = None
    items: list[ReparationItemLine] | None = None
    services: list[ReparationServiceLine] | None = None


class UpdateReparationStatusRequest(BaseModel):
    """Status-only update. Never touches stock."""

    status: str | None = Field(default=None, examples=["completed"])
    end_date: datetime | None = None


# --- Catalog ---


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None


class CreateSupplierRequest(BaseModel):
    name: str = Field(..., min_length=1)
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class UpdateSupplierRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class CreateServiceRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    price: float = Field(default=0.0, ge=0)
    duration: float | None = Field(default=None, ge=0, description="Hours")
    category: str = Field(default="maintenance", examples=["repair"])
    status: str = Field(default="active", examples=["active"])
    notes: str | None = None


class UpdateServiceRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    duration: float | None = Field(default=None, ge=0)
    category: str | None = None
    status: str | None = None
    notes: str | None = None


class CreateVehicleRequest(BaseModel):
    make: str = Field(..., min_length=1, examples=["Renault"])
    model: str = Field(..., min_length=1, examples=["Clio"])
    year: int = Field(..., ge=1900, le=2100)
    license_plate: str | None = None
    vin: str | None = None
    owner_name: str = Field(..., min_length=1)
    owner_phone: str | None = None
    owner_email: str | None = None
    notes: str | None = None


class UpdateVehicleRequest(BaseModel):
    make: str | None = Field(default=None, min_length=1)
    model: str | None = Field(default=None, min_length=1)
    year: int | None = Field(default=None, ge=1900, le=2100)
    license_plate: str | None = None
    vin: str | None = None
    owner_name: str | None = Field(default=None, min_length=1)
    owner_phone: str | None = None
    owner_email: str | None = None
    notes: str | None = None
