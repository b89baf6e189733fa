"""Unit tests for domain exceptions."""

import pytest

from src.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    DuplicateItemCodeError,
    GarageError,
    InsufficientStockError,
    InvalidArgumentError,
    InvalidStatusTransitionError,
    ItemInUseError,
    ItemNotFoundError,
    NotFoundError,
    PartialFailureError,
    StorageError,
    TransactionNotFoundError,
    ValidationError,
)


class TestGarageError:
    """Tests for base GarageError exception."""

    def test_basic_initialization(self):
        error = GarageError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "GarageError"
        assert error.details == {}

    def test_with_custom_code(self):
        error = GarageError("Error message", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict(self):
        error = GarageError("Test error", code="TEST", details={"x": 1})
        assert error.to_dict() == {"error": "TEST", "message": "Test error", "details": {"x": 1}}


class TestNotFoundErrors:
    def test_item_not_found(self):
        error = ItemNotFoundError(42)
        assert isinstance(error, NotFoundError)
        assert error.code == "ITEM_NOT_FOUND"
        assert error.details == {"id": 42}
        assert "42" in error.message

    def test_multiword_entity_code(self):
        assert TransactionNotFoundError(1).code == "STOCK_TRANSACTION_NOT_FOUND"


class TestInsufficientStockError:
    def test_details(self):
        error = InsufficientStockError(item_id=3, requested=5, available=2, item_name="Filter")
        assert error.code == "INSUFFICIENT_STOCK"
        assert error.details["shortfall"] == 3
        assert error.requested == 5
        assert error.available == 2
        assert "Filter" in error.message

    def test_without_name(self):
        error = InsufficientStockError(item_id=3, requested=5, available=2)
        assert "item 3" in error.message


class TestValidationErrors:
    def test_invalid_argument(self):
        error = InvalidArgumentError("quantity", "must be a positive integer", 0)
        assert isinstance(error, ValidationError)
        assert error.code == "INVALID_ARGUMENT"
        assert error.details["value"] == "0"

    def test_invalid_status_transition(self):
        error = InvalidStatusTransitionError("completed", "pending")
        assert isinstance(error, ValidationError)
        assert error.code == "INVALID_STATUS_TRANSITION"
        assert error.details["current"] == "completed"
        assert error.details["requested"] == "pending"


class TestConflictErrors:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ItemInUseError(1, 3), "ITEM_IN_USE"),
            (DuplicateItemCodeError("ITEM-ABC-000001"), "DUPLICATE_ITEM_CODE"),
        ],
    )
    def test_codes(self, error, code):
        assert isinstance(error, ConflictError)
        assert error.code == code


class TestAuthErrors:
    def test_authentication(self):
        assert AuthenticationError().code == "UNAUTHORIZED"

    def test_authorization(self):
        error = AuthorizationError("user", ["admin"])
        assert error.code == "FORBIDDEN"
        assert error.details["allowed"] == ["admin"]


class TestStorageErrors:
    def test_database_error(self):
        error = DatabaseError("insert", "disk full")
        assert isinstance(error, StorageError)
        assert error.code == "DATABASE_ERROR"

    def test_partial_failure(self):
        error = PartialFailureError(
            "create_reparation",
            "boom",
            applied=[{"item_id": 1}],
            uncompensated=[{"item_id": 1}],
        )
        assert isinstance(error, StorageError)
        assert error.code == "PARTIAL_FAILURE"
        assert error.details["uncompensated"] == [{"item_id": 1}]
