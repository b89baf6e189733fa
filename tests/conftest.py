"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from src.api.security import create_access_token
from src.application.services import reset_services
from src.config.settings import reset_settings
from src.core.entities.principal import Role


@pytest.fixture
def admin_token() -> str:
    """Bearer token for an admin principal."""
    return create_access_token("admin-1", Role.ADMIN)


@pytest.fixture
def user_token() -> str:
    """Bearer token for a regular principal."""
    return create_access_token("user-1", Role.USER)


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(user_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
async def sqlite_db(tmp_path: Path, monkeypatch) -> AsyncIterator[Path]:
    """
    Migrated database in a temporary directory.

    Settings, the global connection pool and the service singletons are
    reset around the test so nothing leaks between event loops.
    """
    from src.infrastructure.storage.sqlite import close_pool
    from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database

    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("STORAGE_POOL_SIZE", "2")
    reset_settings()
    reset_services()
    await close_pool()

    db_path = tmp_path / "garage.db"
    results = await initialize_database(db_path)
    assert all(result.success for result in results)

    yield db_path

    await close_pool()
    reset_services()
    reset_settings()
