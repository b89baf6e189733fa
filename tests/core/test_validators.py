"""Tests for boundary validators."""

import pytest

from src.core.entities.stock_transaction import TransactionType
from src.core.exceptions import InvalidArgumentError
from src.core.validators import parse_enum, require_positive_int, validate_sort


class TestParseEnum:
    def test_accepts_value(self):
        assert parse_enum(TransactionType, "purchase", "type") == TransactionType.PURCHASE

    def test_accepts_member(self):
        assert parse_enum(TransactionType, TransactionType.DAMAGE, "type") == TransactionType.DAMAGE

    def test_unknown_lists_allowed_values(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_enum(TransactionType, "theft", "type")
        assert exc_info.value.code == "INVALID_ARGUMENT"
        assert exc_info.value.details["field"] == "type"
        assert "purchase" in exc_info.value.message


class TestRequirePositiveInt:
    @pytest.mark.parametrize("value", [0, -1, 1.5, "3", True, None])
    def test_rejects(self, value):
        with pytest.raises(InvalidArgumentError):
            require_positive_int(value, "quantity")

    def test_accepts(self):
        assert require_positive_int(7, "quantity") == 7


class TestValidateSort:
    def test_accepts_descending(self):
        assert validate_sort("-name", frozenset({"name"})) == "-name"

    def test_rejects_unknown(self):
        with pytest.raises(InvalidArgumentError, match="unknown sort field"):
            validate_sort("password", frozenset({"name"}))
