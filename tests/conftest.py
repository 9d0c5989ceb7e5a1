"""Shared fixtures for Later search tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from result import Err, Ok, Result

from later.config import Config
from later.data.db import Database
from later.data.importer import ContentImporter
from later.errors import AppError
from later.models.content import ContentType
from later.models.search import SearchQuery, SearchResult

SNAPSHOT: dict[str, list[dict[str, Any]]] = {
    "spaces": [
        {"id": "space-1", "user_id": "user-1", "name": "Personal"},
        {"id": "space-2", "user_id": "user-2", "name": "Work"},
    ],
    "notes": [
        {
            "id": "note-1",
            "user_id": "user-1",
            "space_id": "space-1",
            "title": "Shopping List",
            "content": "eggs and bread",
            "tags": ["errands"],
            "updated_at": "2025-01-03T10:00:00Z",
        },
        {
            "id": "note-2",
            "user_id": "user-1",
            "space_id": "space-1",
            "title": "Meeting notes",
            "content": "discuss the shopping budget for the offsite",
            "tags": ["work"],
            "updated_at": "2025-01-05T10:00:00Z",
        },
        {
            "id": "note-3",
            "user_id": "user-2",
            "space_id": "space-2",
            "title": "Shopping elsewhere",
            "content": "not visible from space-1",
            "updated_at": "2025-01-09T10:00:00Z",
        },
    ],
    "todo_lists": [
        {
            "id": "todo-list-1",
            "user_id": "user-1",
            "space_id": "space-1",
            "name": "Groceries",
            "description": "weekly shopping run",
            "updated_at": "2025-01-04T10:00:00Z",
        },
        {
            "id": "todo-list-2",
            "user_id": "user-1",
            "space_id": "space-1",
            "name": "Chores",
            "updated_at": "2025-01-01T10:00:00Z",
        },
    ],
    "lists": [
        {
            "id": "list-1",
            "user_id": "user-1",
            "space_id": "space-1",
            "name": "Einkaufsliste",
            "updated_at": "2025-01-02T10:00:00Z",
        },
        {
            "id": "list-2",
            "user_id": "user-1",
            "space_id": "space-1",
            "name": "Books to read",
            "updated_at": "2025-01-06T10:00:00Z",
        },
    ],
    "todo_items": [
        {
            "id": "todo-item-1",
            "todo_list_id": "todo-list-1",
            "title": "Buy milk",
            "description": "oat milk preferred",
            "tags": ["errands"],
        },
        {
            "id": "todo-item-2",
            "todo_list_id": "todo-list-2",
            "title": "Take out trash",
        },
        {
            "id": "todo-item-3",
            "todo_list_id": "todo-list-1",
            "title": "Milk chocolate",
            "tags": ["treats"],
        },
    ],
    "list_items": [
        {"id": "list-item-1", "list_id": "list-1", "title": "Milch", "notes": "2 liters"},
        {"id": "list-item-2", "list_id": "list-2", "title": "Milk and Honey", "notes": "poetry"},
    ],
}


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config pointing at a temporary data directory."""
    return Config(data_dir=tmp_path / "data", debounce_ms=20)


@pytest.fixture
async def in_memory_db() -> AsyncGenerator[Database]:
    """SQLite in-memory database for fast unit/integration tests."""
    db = Database(Path(":memory:"))
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)


@pytest.fixture
async def seeded_db(in_memory_db: Database) -> Database:
    """Database loaded with two spaces worth of content."""
    await ContentImporter(in_memory_db).import_snapshot(SNAPSHOT)
    return in_memory_db


def make_result(
    result_id: str,
    content_type: ContentType = ContentType.NOTE,
    title: str = "",
    updated_at: datetime | None = None,
) -> SearchResult:
    return SearchResult(
        id=result_id,
        type=content_type,
        title=title or result_id,
        updated_at=updated_at or datetime(2025, 1, 1, tzinfo=UTC),
    )


def make_query(text: str, space_id: str = "space-1", **kwargs: Any) -> SearchQuery:
    return SearchQuery(text=text, space_id=space_id, **kwargs)


class FakeSearchService:
    """Records queries; can block per query text, fail, or raise."""

    def __init__(self, results: list[SearchResult] | None = None) -> None:
        self.results = list(results or [])
        self.queries: list[SearchQuery] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.error: AppError | None = None
        self.exception: Exception | None = None

    async def search(self, query: SearchQuery) -> Result[list[SearchResult], AppError]:
        self.queries.append(query)
        results = list(self.results)
        gate = self.gates.get(query.text)
        if gate is not None:
            await gate.wait()
        if self.exception is not None:
            raise self.exception
        if self.error is not None:
            return Err(self.error)
        return Ok(results)


@pytest.fixture
def fake_service() -> FakeSearchService:
    return FakeSearchService()
