"""
Domain exceptions for the garage stock application.

Every failure crossing the API boundary is one of these, carrying a stable
machine-readable code and a human-readable message.
"""

from typing import Any


class GarageError(Exception):
    """Base exception for all garage stock errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Lookup Exceptions
class NotFoundError(GarageError):
    """Base exception for missing records."""

    entity = "Record"

    def __init__(self, entity_id: int | str):
        code = f"{self.entity.upper().replace(' ', '_')}_NOT_FOUND"
        super().__init__(
            f"{self.entity} not found: {entity_id}",
            code=code,
            details={"id": entity_id},
        )


class ItemNotFoundError(NotFoundError):
    """Inventory item not found."""

    entity = "Item"


class ServiceNotFoundError(NotFoundError):
    """Catalog service not found."""

    entity = "Service"


class VehicleNotFoundError(NotFoundError):
    """Vehicle not found."""

    entity = "Vehicle"


class ReparationNotFoundError(NotFoundError):
    """Reparation not found."""

    entity = "Reparation"


class TransactionNotFoundError(NotFoundError):
    """Stock transaction not found."""

    entity = "Stock transaction"


class CategoryNotFoundError(NotFoundError):
    """Category not found."""

    entity = "Category"


class SupplierNotFoundError(NotFoundError):
    """Supplier not found."""

    entity = "Supplier"


# Stock Exceptions
class InsufficientStockError(GarageError):
    """Requested magnitude exceeds the available quantity."""

    def __init__(
        self,
        item_id: int,
        requested: int,
        available: int,
        item_name: str | None = None,
    ):
        label = item_name or f"item {item_id}"
        super().__init__(
            f"Not enough stock for {label}: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "item_id": item_id,
                "item_name": item_name,
                "requested": requested,
                "available": available,
                "shortfall": requested - available,
            },
        )
        self.item_id = item_id
        self.requested = requested
        self.available = available


# Validation Exceptions
class ValidationError(GarageError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidArgumentError(ValidationError):
    """Unknown enum value, non-positive magnitude or malformed identifier."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(field, message, value)
        self.code = "INVALID_ARGUMENT"


class InvalidStatusTransitionError(ValidationError):
    """Reparation status change not allowed by the lifecycle."""

    def __init__(self, current: str, requested: str):
        super().__init__(
            field="status",
            message=f"Cannot move reparation from '{current}' to '{requested}'",
            value=requested,
        )
        self.code = "INVALID_STATUS_TRANSITION"
        self.details.update({"current": current, "requested": requested})


# Conflict Exceptions
class ConflictError(GarageError):
    """Operation conflicts with existing data."""

    pass


class ItemInUseError(ConflictError):
    """Item is referenced by ledger entries or reparations."""

    def __init__(self, item_id: int, references: int):
        super().__init__(
            f"Item {item_id} is referenced by {references} record(s) and cannot be deleted",
            code="ITEM_IN_USE",
            details={"item_id": item_id, "references": references},
        )


class DuplicateItemCodeError(ConflictError):
    """Another item already uses this code."""

    def __init__(self, item_code: str):
        super().__init__(
            f"Item code already exists: {item_code}",
            code="DUPLICATE_ITEM_CODE",
            details={"item_code": item_code},
        )


# Auth Exceptions
class AuthenticationError(GarageError):
    """Principal missing or token invalid."""

    def __init__(self, reason: str = "Not authorized to access this route"):
        super().__init__(reason, code="UNAUTHORIZED")


class AuthorizationError(GarageError):
    """Principal lacks the required role."""

    def __init__(self, role: str, allowed: list[str]):
        super().__init__(
            f"User role {role} is not authorized to access this route",
            code="FORBIDDEN",
            details={"role": role, "allowed": allowed},
        )


# Storage Exceptions
class StorageError(GarageError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class PartialFailureError(StorageError):
    """A batch failed after some movements were committed.

    ``applied`` lists the movements that went through before the failure,
    ``uncompensated`` the ones whose compensating movement also failed.
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        applied: list[dict[str, Any]] | None = None,
        uncompensated: list[dict[str, Any]] | None = None,
    ):
        super().__init__(
            f"{operation} failed part-way: {reason}",
            code="PARTIAL_FAILURE",
            details={
                "operation": operation,
                "reason": reason,
                "applied": applied or [],
                "uncompensated": uncompensated or [],
            },
        )
