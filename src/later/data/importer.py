"""Bulk import of content snapshots (spaces, notes, lists and items) into SQLite."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from later.data.db import Database

logger = logging.getLogger(__name__)

# table -> (columns, columns holding JSON arrays)
_TABLE_COLUMNS: dict[str, tuple[tuple[str, ...], frozenset[str]]] = {
    "spaces": (("id", "user_id", "name", "created_at", "updated_at"), frozenset()),
    "notes": (
        ("id", "user_id", "space_id", "title", "content", "tags", "created_at", "updated_at"),
        frozenset({"tags"}),
    ),
    "todo_lists": (
        ("id", "user_id", "space_id", "name", "description", "created_at", "updated_at"),
        frozenset(),
    ),
    "lists": (("id", "user_id", "space_id", "name", "created_at", "updated_at"), frozenset()),
    "todo_items": (
        ("id", "todo_list_id", "title", "description", "tags", "is_completed", "sort_order"),
        frozenset({"tags"}),
    ),
    "list_items": (
        ("id", "list_id", "title", "notes", "is_checked", "sort_order"),
        frozenset(),
    ),
}

_TIMESTAMP_COLUMNS = frozenset({"created_at", "updated_at"})
_FLAG_COLUMNS = frozenset({"is_completed", "is_checked", "sort_order"})


@dataclass
class ImportResult:
    """Number of rows written per table."""

    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def __str__(self) -> str:
        parts = ", ".join(f"{table}={count}" for table, count in self.counts.items())
        return f"ImportResult({parts})"


class ContentImporter:
    """Upserts snapshot rows so the full-text triggers stay in sync."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def import_snapshot(self, snapshot: dict[str, list[dict[str, Any]]]) -> ImportResult:
        """Write every table present in ``snapshot``, parents before children."""
        unknown = set(snapshot) - set(_TABLE_COLUMNS)
        if unknown:
            logger.warning("Ignoring unknown snapshot tables: %s", ", ".join(sorted(unknown)))

        result = ImportResult()
        now = datetime.now(UTC).isoformat()
        for table, (columns, json_columns) in _TABLE_COLUMNS.items():
            records = snapshot.get(table) or []
            if not records:
                continue
            rows = [_row_values(record, columns, json_columns, now) for record in records]
            await self._db.execute_many(_upsert_sql(table, columns), rows)
            result.counts[table] = len(rows)
            logger.debug("Imported %d rows into %s", len(rows), table)
        await self._db.commit()
        return result


def _upsert_sql(table: str, columns: tuple[str, ...]) -> str:
    placeholders = ", ".join("?" for _ in columns)
    updates = ", ".join(f"{col} = excluded.{col}" for col in columns if col != "id")
    return (
        f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) "
        f"ON CONFLICT(id) DO UPDATE SET {updates}"
    )


def _row_values(
    record: dict[str, Any],
    columns: tuple[str, ...],
    json_columns: frozenset[str],
    now: str,
) -> tuple[object, ...]:
    values: list[object] = []
    for col in columns:
        value = record.get(col)
        if col in json_columns:
            values.append(json.dumps(list(value or [])))
        elif col in _TIMESTAMP_COLUMNS:
            values.append(normalize_timestamp(value) if value else now)
        elif col in _FLAG_COLUMNS:
            values.append(int(value or 0))
        else:
            values.append(value)
    return tuple(values)


def normalize_timestamp(value: str | datetime) -> str:
    """Return an ISO-8601 UTC timestamp; naive values are treated as UTC."""
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).isoformat()
