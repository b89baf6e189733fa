"""API tests for stock transaction endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_ledger, get_record_stock_transaction_use_case
from src.api.main import app
from src.application.use_cases import RecordStockTransactionUseCase
from src.core.entities.item import Item
from src.core.entities.stock_transaction import (
    StockTransaction,
    TransactionStats,
    TransactionType,
)
from src.core.exceptions import InsufficientStockError, InvalidArgumentError
from src.core.services.stock_mutation import MovementResult
from src.infrastructure.storage.sqlite import SQLiteLedgerStore


@pytest.fixture
def purchase() -> StockTransaction:
    return StockTransaction(
        id=10,
        item_id=1,
        type=TransactionType.PURCHASE,
        quantity=5,
        quantity_before=1,
        quantity_after=6,
        unit_price=2.0,
    )


@pytest.fixture
def mock_record(purchase):
    uc = AsyncMock(spec=RecordStockTransactionUseCase)
    uc.execute.return_value = MovementResult(
        item=Item(id=1, name="Oil", quantity=6), transaction=purchase
    )
    uc.to_response = RecordStockTransactionUseCase().to_response
    return uc


@pytest.fixture
def mock_ledger(purchase):
    store = AsyncMock(spec=SQLiteLedgerStore)
    store.get_transaction.return_value = purchase
    store.get_stats.return_value = [
        TransactionStats(
            type=TransactionType.PURCHASE, count=2, total_quantity=9, total_amount=18.0
        )
    ]
    return store


@pytest.fixture
async def client(mock_record, mock_ledger):
    app.dependency_overrides[get_record_stock_transaction_use_case] = lambda: mock_record
    app.dependency_overrides[get_ledger] = lambda: mock_ledger
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def test_record(client, user_headers, mock_record):
    response = await client.post(
        "/api/stock-transactions",
        json={"item_id": 1, "type": "purchase", "quantity": 5},
        headers=user_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["item"]["quantity"] == 6
    assert data["transaction"]["total_amount"] == 10.0
    assert mock_record.execute.call_args.kwargs["actor"] == "user-1"


async def test_insufficient_stock_is_400(client, user_headers, mock_record):
    mock_record.execute.side_effect = InsufficientStockError(1, requested=9, available=6)

    response = await client.post(
        "/api/stock-transactions",
        json={"item_id": 1, "type": "damage", "quantity": 9},
        headers=user_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "INSUFFICIENT_STOCK"
    assert body["detail"]["shortfall"] == 3


async def test_invalid_type_is_400(client, user_headers, mock_record):
    mock_record.execute.side_effect = InvalidArgumentError("type", "not a manual type", "sale")

    response = await client.post(
        "/api/stock-transactions",
        json={"item_id": 1, "type": "sale", "quantity": 1},
        headers=user_headers,
    )

    assert response.status_code == 400


async def test_stats(client, user_headers):
    response = await client.get("/api/stock-transactions/stats", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["stats"][0] == {
        "type": "purchase",
        "count": 2,
        "total_quantity": 9,
        "total_amount": 18.0,
    }


async def test_get_missing(client, user_headers, mock_ledger):
    mock_ledger.get_transaction.return_value = None

    response = await client.get("/api/stock-transactions/5", headers=user_headers)

    assert response.status_code == 404
    assert response.json()["error_code"] == "STOCK_TRANSACTION_NOT_FOUND"
