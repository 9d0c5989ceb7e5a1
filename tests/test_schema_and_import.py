"""Schema versioning and snapshot import tests."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from conftest import SNAPSHOT, make_query

from later.data.db import SCHEMA_VERSION, Database
from later.data.importer import ContentImporter, normalize_timestamp
from later.data.search import SearchRepository
from later.models.content import ContentType


@pytest.mark.asyncio
async def test_db_rebuilds_when_schema_version_changes(tmp_path) -> None:
    db_path = tmp_path / "schema-reset.db"
    async with Database(db_path) as db:
        assert db.schema_was_rebuilt is False
        await ContentImporter(db).import_snapshot({"spaces": SNAPSHOT["spaces"]})
        await db.execute(
            "INSERT OR REPLACE INTO app_meta (key, value) VALUES ('schema_version', '0')"
        )
        await db.commit()

    async with Database(db_path) as db:
        version = await db.fetch_one("SELECT value FROM app_meta WHERE key = 'schema_version'")
        spaces = await db.fetch_one("SELECT COUNT(*) as cnt FROM spaces")
        assert version is not None and int(version["value"]) == SCHEMA_VERSION
        assert spaces is not None and int(spaces["cnt"]) == 0


@pytest.mark.asyncio
async def test_reopening_current_schema_keeps_content(tmp_path) -> None:
    db_path = tmp_path / "keep.db"
    async with Database(db_path) as db:
        await ContentImporter(db).import_snapshot(SNAPSHOT)

    async with Database(db_path) as db:
        assert db.schema_was_rebuilt is False
        results = await SearchRepository(db).search(make_query("shopping"))
        assert len(results) == 3


@pytest.mark.asyncio
async def test_import_counts_rows(in_memory_db: Database) -> None:
    result = await ContentImporter(in_memory_db).import_snapshot(SNAPSHOT)
    assert result.counts["notes"] == 3
    assert result.counts["list_items"] == 2
    assert result.total == sum(len(rows) for rows in SNAPSHOT.values())


@pytest.mark.asyncio
async def test_reimport_updates_full_text_index(seeded_db: Database) -> None:
    renamed = dict(SNAPSHOT["lists"][1], name="Podcasts")
    await ContentImporter(seeded_db).import_snapshot({"lists": [renamed]})

    repo = SearchRepository(seeded_db)
    types = frozenset({ContentType.LIST})
    assert await repo.search(make_query("books", content_types=types)) == []
    hits = await repo.search(make_query("podcasts", content_types=types))
    assert [r.id for r in hits] == ["list-2"]


@pytest.mark.asyncio
async def test_deleting_parent_removes_children_from_search(seeded_db: Database) -> None:
    await seeded_db.execute("DELETE FROM todo_lists WHERE id = ?", ("todo-list-1",))
    await seeded_db.commit()
    results = await SearchRepository(seeded_db).search(make_query("milk"))
    assert [r.id for r in results] == ["list-item-2"]


def test_normalize_timestamp() -> None:
    assert normalize_timestamp("2025-01-03T10:00:00Z") == "2025-01-03T10:00:00+00:00"
    assert normalize_timestamp("2025-01-03T12:00:00+02:00") == "2025-01-03T10:00:00+00:00"
    naive = datetime(2025, 1, 3, 10, 0)
    assert normalize_timestamp(naive) == datetime(2025, 1, 3, 10, tzinfo=UTC).isoformat()
