"""Protocol definitions for services."""

from __future__ import annotations

from typing import Protocol

from result import Result

from later.errors import AppError
from later.models.search import SearchQuery, SearchResult


class SearchServiceProtocol(Protocol):
    """Interface for search operations."""

    async def search(self, query: SearchQuery) -> Result[list[SearchResult], AppError]: ...
