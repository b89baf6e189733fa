"""API tests for item endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import (
    get_create_item_use_case,
    get_delete_item_use_case,
    get_items,
)
from src.api.main import app
from src.application.use_cases import CreateItemUseCase, DeleteItemUseCase
from src.application.use_cases.create_item import CreateItemResult
from src.core.entities.item import Item
from src.core.entities.pagination import Page
from src.core.exceptions import ItemInUseError, ItemNotFoundError
from src.infrastructure.storage.sqlite import SQLiteItemStore


def _item(**fields) -> Item:
    defaults = {"id": 1, "name": "Brake pads", "quantity": 3, "buy_price": 20.0, "sell_price": 30.0}
    return Item(**{**defaults, **fields})


@pytest.fixture
def mock_store():
    store = AsyncMock(spec=SQLiteItemStore)
    store.get_item.return_value = _item()
    store.list_items.return_value = Page(items=[_item(), _item(id=2, name="Disc")], total=7, page=1, limit=2)
    return store


@pytest.fixture
def mock_create():
    uc = AsyncMock(spec=CreateItemUseCase)
    uc.execute.return_value = CreateItemResult(item=_item())
    uc.to_response = CreateItemUseCase().to_response
    return uc


@pytest.fixture
def mock_delete():
    return AsyncMock(spec=DeleteItemUseCase)


@pytest.fixture
async def client(mock_store, mock_create, mock_delete):
    """Async client with item dependencies overridden."""
    app.dependency_overrides[get_items] = lambda: mock_store
    app.dependency_overrides[get_create_item_use_case] = lambda: mock_create
    app.dependency_overrides[get_delete_item_use_case] = lambda: mock_delete
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class TestAuthentication:
    async def test_missing_token(self, client):
        response = await client.get("/api/items")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["error_code"] == "UNAUTHORIZED"

    async def test_garbage_token(self, client):
        response = await client.get(
            "/api/items", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    async def test_user_cannot_create(self, client, user_headers, mock_create):
        response = await client.post("/api/items", json={"name": "Pads"}, headers=user_headers)

        assert response.status_code == 403
        assert response.json()["error_code"] == "FORBIDDEN"
        mock_create.execute.assert_not_called()

    async def test_user_can_read(self, client, user_headers):
        response = await client.get("/api/items/1", headers=user_headers)
        assert response.status_code == 200


class TestListItems:
    async def test_pagination_envelope(self, client, user_headers):
        response = await client.get("/api/items?limit=2", headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 7
        assert data["pages"] == 4
        assert [i["name"] for i in data["items"]] == ["Brake pads", "Disc"]
        assert data["items"][0]["profit_margin"] == 10.0

    async def test_filters_forwarded(self, client, user_headers, mock_store):
        await client.get(
            "/api/items?status=low_stock&category_id=4&search=pad&sort=name",
            headers=user_headers,
        )

        filters, page = mock_store.list_items.call_args.args
        assert filters.status.value == "low_stock"
        assert filters.category_id == 4
        assert filters.search == "pad"
        assert page.sort == "name"

    async def test_limit_clamped(self, client, user_headers, mock_store):
        await client.get("/api/items?limit=100000", headers=user_headers)

        _, page = mock_store.list_items.call_args.args
        assert page.limit == 500

    async def test_unknown_status(self, client, user_headers):
        response = await client.get("/api/items?status=plenty", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ARGUMENT"


class TestItemWrites:
    async def test_create(self, client, admin_headers, mock_create):
        response = await client.post(
            "/api/items", json={"name": "Brake pads", "quantity": 3}, headers=admin_headers
        )

        assert response.status_code == 201
        assert response.json()["id"] == 1
        request = mock_create.execute.call_args.args[0]
        assert request.quantity == 3
        assert mock_create.execute.call_args.kwargs["actor"] == "admin-1"

    async def test_create_rejects_negative_quantity(self, client, admin_headers):
        response = await client.post(
            "/api/items", json={"name": "Pads", "quantity": -1}, headers=admin_headers
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_get_missing(self, client, user_headers, mock_store):
        mock_store.get_item.return_value = None

        response = await client.get("/api/items/99", headers=user_headers)

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "ITEM_NOT_FOUND"
        assert body["hint"]
        assert body["path"] == "/api/items/99"

    async def test_delete(self, client, admin_headers, mock_delete):
        response = await client.delete("/api/items/1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"id": 1, "deleted": True, "message": "Item deleted"}
        mock_delete.execute.assert_awaited_once_with(1)

    async def test_delete_in_use(self, client, admin_headers, mock_delete):
        mock_delete.execute.side_effect = ItemInUseError(1, 3)

        response = await client.delete("/api/items/1", headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "ITEM_IN_USE"

    async def test_delete_missing(self, client, admin_headers, mock_delete):
        mock_delete.execute.side_effect = ItemNotFoundError(1)
        response = await client.delete("/api/items/1", headers=admin_headers)
        assert response.status_code == 404
