"""Search models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from later.models.content import ALL_CONTENT_TYPES, ContentType


class SearchQuery(BaseModel):
    """A search request scoped to one space.

    ``content_types`` of ``None`` searches every table, while an empty set
    searches nothing. ``limit`` and ``offset`` apply per content type; a
    ``limit`` of ``None`` uses the repository's configured default.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    space_id: str
    content_types: frozenset[ContentType] | None = None
    tags: tuple[str, ...] | None = None
    limit: int | None = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)
    include_content: bool = False

    def with_text(self, text: str) -> SearchQuery:
        return self.model_copy(update={"text": text})

    def searched_types(self) -> list[ContentType]:
        """Content types to search, in declaration order."""
        if self.content_types is None:
            return list(ALL_CONTENT_TYPES)
        return [ct for ct in ALL_CONTENT_TYPES if ct in self.content_types]


class SearchResult(BaseModel):
    """A single search hit normalized across content types."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: ContentType
    title: str
    preview: str | None = None
    subtitle: str | None = None
    tags: list[str] = Field(default_factory=list)
    updated_at: datetime
    content: str | None = None
    parent_id: str | None = None
    parent_name: str | None = None

    @property
    def is_child_item(self) -> bool:
        return not self.type.is_container


class SearchFilters(BaseModel):
    """Filter selections applied on top of the typed search text."""

    model_config = ConfigDict(frozen=True)

    content_types: frozenset[ContentType] | None = None
    tags: tuple[str, ...] | None = None

    @property
    def has_active_filters(self) -> bool:
        return bool(self.content_types) or bool(self.tags)

    def apply(self, query: SearchQuery) -> SearchQuery:
        """Return ``query`` restricted to these filters."""
        return query.model_copy(
            update={
                "content_types": self.content_types or None,
                "tags": self.tags or None,
            }
        )
