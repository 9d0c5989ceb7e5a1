"""Search service: validation and error normalization in front of the repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from later.errors import AppError, out_of_range, required_field

if TYPE_CHECKING:
    from later.data.protocols import SearchRepositoryProtocol
    from later.models.search import SearchQuery, SearchResult

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 500


def validate_query(
    query: SearchQuery, max_length: int = MAX_QUERY_LENGTH
) -> SearchQuery | None:
    """Normalize ``query`` or reject it.

    Returns None when the query should yield no results without touching
    storage (blank text, or an explicitly empty content type filter).

    Raises:
        AppError: VALIDATION_REQUIRED for a missing space id,
            VALIDATION_OUT_OF_RANGE when the trimmed text is too long.
    """
    text = query.text.strip()
    if not text:
        return None
    if not query.space_id:
        raise required_field("Space ID")
    if len(text) > max_length:
        raise out_of_range("Query length", "1", str(max_length))
    if query.content_types is not None and not query.content_types:
        return None
    return query.with_text(text)


class SearchService:
    """Service for full-text search."""

    def __init__(
        self,
        repository: SearchRepositoryProtocol,
        max_query_length: int = MAX_QUERY_LENGTH,
    ) -> None:
        self._repository = repository
        self._max_query_length = max_query_length

    async def search(self, query: SearchQuery) -> Result[list[SearchResult], AppError]:
        """Validate ``query`` and run it against the repository.

        Returns:
            Ok with results sorted newest first (empty for blank input), or
            Err with an AppError. Repository AppErrors pass through unchanged;
            anything else is wrapped as UNKNOWN_ERROR.
        """
        try:
            validated = validate_query(query, self._max_query_length)
        except AppError as exc:
            return Err(exc)
        if validated is None:
            return Ok([])

        try:
            results = await self._repository.search(validated)
        except AppError as exc:
            return Err(exc)
        except Exception as exc:
            logger.exception("Search failed for space %s", validated.space_id)
            return Err(AppError.unknown(exc, "search"))
        return Ok(results)
