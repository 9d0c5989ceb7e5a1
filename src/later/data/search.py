"""FTS5 search queries across the five content tables."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from later.data.errors import map_database_error
from later.models.content import CONTENT_TABLES, ContentTable, ContentType
from later.models.search import SearchQuery, SearchResult

if TYPE_CHECKING:
    from later.data.protocols import DatabaseProtocol

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MIN_TRIGRAM_TERM = 3

_SNIPPET_TOKENS = 64
_PREVIEW_CHARS = 64


class SearchRepository:
    """Substring search over notes, lists and their items within a space."""

    def __init__(
        self,
        db: DatabaseProtocol,
        user_id: str | None = None,
        default_limit: int = DEFAULT_LIMIT,
    ) -> None:
        self._db = db
        self._user_id = user_id
        self._default_limit = default_limit

    async def search(self, query: SearchQuery) -> list[SearchResult]:
        """Search every content type selected by ``query``.

        Expects a validated query (trimmed text, non-empty space id). Every
        term must appear somewhere in the title or body, case-insensitively.
        Terms of three or more characters go through the trigram index;
        shorter ones fall back to ``LIKE``. Issues one statement per content
        type, merges the hits and orders them by ``updated_at`` descending
        with ``id`` ascending as tie-break.

        Raises:
            AppError: when the database reports an error.
        """
        fts_query, short_terms = _split_terms(query.text)
        if not fts_query and not short_terms:
            return []

        results: list[SearchResult] = []
        for content_type in query.searched_types():
            rows = await self._fetch(content_type, fts_query, short_terms, query)
            results.extend(_row_to_result(content_type, row, query.include_content) for row in rows)
            logger.debug("Search %r matched %d %s rows", query.text, len(rows), content_type)

        results.sort(key=lambda r: r.id)
        results.sort(key=lambda r: r.updated_at, reverse=True)
        return results

    async def _fetch(
        self,
        content_type: ContentType,
        fts_query: str,
        short_terms: list[str],
        query: SearchQuery,
    ) -> list[Any]:
        sql, params = self._build_sql(content_type, fts_query, short_terms, query)
        try:
            return await self._db.fetch_all(sql, tuple(params))
        except sqlite3.Error as exc:
            raise map_database_error(exc) from exc

    def _build_sql(
        self,
        content_type: ContentType,
        fts_query: str,
        short_terms: list[str],
        query: SearchQuery,
    ) -> tuple[str, list[str | int]]:
        meta = CONTENT_TABLES[content_type]
        fts = f"{meta.table}_fts"
        owner = "c"
        params: list[str | int] = []
        conditions: list[str] = []

        if not meta.body_column:
            preview = "NULL AS preview"
        elif fts_query:
            preview = f"snippet({fts}, 1, '', '', '...', {_SNIPPET_TOKENS}) AS preview"
        else:
            preview = f"substr(c.{meta.body_column}, 1, {_PREVIEW_CHARS}) AS preview"

        select = [
            "c.id AS id",
            f"c.{meta.title_column} AS title",
            f"c.{meta.body_column} AS body" if meta.body_column else "NULL AS body",
            preview,
            "c.tags AS tags" if meta.has_tags else "NULL AS tags",
        ]

        if fts_query:
            source = fts
            joins = [f"JOIN {meta.table} c ON c.rowid = {fts}.rowid"]
            conditions.append(f"{fts} MATCH ?")
            params.append(fts_query)
        else:
            source = f"{meta.table} c"
            joins = []

        if meta.parent is not None:
            parent = CONTENT_TABLES[meta.parent]
            owner = "p"
            joins.append(f"JOIN {parent.table} p ON p.id = c.{meta.parent_key}")
            select.extend(
                [
                    "p.id AS parent_id",
                    f"p.{parent.title_column} AS parent_name",
                    "p.updated_at AS updated_at",
                ]
            )
        else:
            select.append("c.updated_at AS updated_at")

        columns = [f"c.{col}" for col in (meta.title_column, meta.body_column) if col]
        for term in short_terms:
            pattern = f"%{_escape_like(term)}%"
            conditions.append(
                "(" + " OR ".join(f"{col} LIKE ? ESCAPE '\\'" for col in columns) + ")"
            )
            params.extend(pattern for _ in columns)

        conditions.append(f"{owner}.space_id = ?")
        params.append(query.space_id)
        if self._user_id:
            conditions.append(f"{owner}.user_id = ?")
            params.append(self._user_id)
        if query.tags and meta.has_tags:
            placeholders = ",".join("?" for _ in query.tags)
            conditions.append(
                f"EXISTS (SELECT 1 FROM json_each(c.tags) t WHERE t.value IN ({placeholders}))"
            )
            params.extend(query.tags)

        params.extend([query.limit or self._default_limit, query.offset])
        sql = (
            f"SELECT {', '.join(select)}\n"
            f"FROM {source}\n"
            + "".join(f"{join}\n" for join in joins)
            + f"WHERE {' AND '.join(conditions)}\n"
            f"ORDER BY {owner}.updated_at DESC, c.id ASC\n"
            "LIMIT ? OFFSET ?"
        )
        return sql, params


def _row_to_result(content_type: ContentType, row: Any, include_content: bool) -> SearchResult:
    meta: ContentTable = CONTENT_TABLES[content_type]
    body = row["body"] or None
    parent_id = row["parent_id"] if meta.parent is not None else None
    parent_name = row["parent_name"] if meta.parent is not None else None

    if parent_name is not None:
        subtitle = parent_name
    elif content_type is ContentType.TODO_LIST:
        subtitle = body
    else:
        subtitle = None

    return SearchResult(
        id=row["id"],
        type=content_type,
        title=row["title"] or "",
        preview=row["preview"] or None,
        subtitle=subtitle,
        tags=_parse_tags(row["tags"]),
        updated_at=_parse_timestamp(row["updated_at"]),
        content=body if include_content else None,
        parent_id=parent_id,
        parent_name=parent_name,
    )


def _parse_timestamp(raw: str | datetime) -> datetime:
    """Parse a stored timestamp; naive values are taken as UTC."""
    value = raw if isinstance(raw, datetime) else datetime.fromisoformat(raw)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _parse_tags(raw: object) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, list):
        return [str(tag) for tag in raw]
    try:
        parsed = json.loads(str(raw))
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed tags value: %r", raw)
        return []
    return [str(tag) for tag in parsed] if isinstance(parsed, list) else []


def _split_terms(text: str) -> tuple[str, list[str]]:
    """Split search text into an FTS5 expression and short ``LIKE`` terms.

    Terms of at least three characters become quoted trigram phrases, which
    match anywhere inside a word. Shorter terms cannot be matched by the
    trigram index and are returned separately. Terms without any letter or
    digit are dropped.
    """
    phrases: list[str] = []
    short_terms: list[str] = []
    for term in text.strip().split():
        if not any(ch.isalnum() for ch in term):
            continue
        if len(term) < MIN_TRIGRAM_TERM:
            short_terms.append(term)
            continue
        safe_term = term.replace('"', '""')
        phrases.append(f'"{safe_term}"')
    return " ".join(phrases), short_terms


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
