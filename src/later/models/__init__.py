"""Pydantic models for Later search."""

from later.models.content import (
    ALL_CONTENT_TYPES,
    CONTENT_TABLES,
    ContentTable,
    ContentType,
    parse_content_type,
)
from later.models.search import SearchFilters, SearchQuery, SearchResult

__all__ = [
    "ALL_CONTENT_TYPES",
    "CONTENT_TABLES",
    "ContentTable",
    "ContentType",
    "SearchFilters",
    "SearchQuery",
    "SearchResult",
    "parse_content_type",
]
