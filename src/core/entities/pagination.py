"""Pagination and sorting primitives shared by the list queries."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class PageRequest:
    """1-based page, page size and a sort key such as ``-created_at``."""

    page: int = 1
    limit: int = 20
    sort: str = "-created_at"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def sort_field(self) -> str:
        return self.sort.lstrip("-")

    @property
    def descending(self) -> bool:
        return self.sort.startswith("-")


@dataclass
class Page(Generic[T]):
    """One page of results plus the unpaginated total."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 1
        return max(1, math.ceil(self.total / self.limit))
