"""Tests for the exception to ErrorResponse mapping."""

import json

import pytest
from starlette.requests import Request

from src.api.middleware.error_handler import build_error_response
from src.core.exceptions import (
    AuthenticationError,
    InvalidArgumentError,
    ItemNotFoundError,
)


def _request(path: str = "/api/stock-transactions/1") -> Request:
    return Request(
        {"type": "http", "method": "GET", "path": path, "headers": [], "query_string": b""}
    )


def _body(response) -> dict:
    return json.loads(response.body)


@pytest.mark.parametrize(
    ("exc", "status_code", "error_code"),
    [
        (ItemNotFoundError(3), 404, "ITEM_NOT_FOUND"),
        (
            InvalidArgumentError("type", "unknown transaction type", "theft"),
            400,
            "INVALID_ARGUMENT",
        ),
        (AuthenticationError(), 401, "UNAUTHORIZED"),
    ],
)
def test_domain_errors(exc, status_code, error_code):
    response = build_error_response(_request(), exc)

    assert response.status_code == status_code
    assert _body(response)["error_code"] == error_code


def test_unauthorized_sets_bearer_challenge():
    response = build_error_response(_request(), AuthenticationError())
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_plain_value_error_is_internal():
    """A broken invariant on a stored row is a server fault, not a bad request."""
    exc = ValueError("quantity_after must end at 15 for a purchase of 5 from 9")

    response = build_error_response(_request(), exc)

    body = _body(response)
    assert response.status_code == 500
    assert body["message"] == "Internal server error"
    assert "quantity_after" not in response.body.decode()
    assert body["path"] == "/api/stock-transactions/1"
