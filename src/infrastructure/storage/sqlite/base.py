"""Helpers shared by the SQLite stores."""

import functools
from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.pagination import PageRequest
from src.core.exceptions import DatabaseError
from src.core.validators import validate_sort

logger = get_logger(__name__)


def db_operation(operation: str):
    """Re-raise driver errors from a store method as DatabaseError."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except aiosqlite.Error as e:
                logger.error("database_error", operation=operation, error=str(e))
                raise DatabaseError(operation, str(e)) from e

        return wrapper

    return decorator


def order_by(page: PageRequest, allowed: frozenset[str], table: str | None = None) -> str:
    """ORDER BY clause for a whitelisted sort key; id breaks ties."""
    validate_sort(page.sort, allowed)
    direction = "DESC" if page.descending else "ASC"
    prefix = f"{table}." if table else ""
    return f"ORDER BY {prefix}{page.sort_field} {direction}, {prefix}id {direction}"


def iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
