"""Holder for the search filter selections."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeAlias

from later.models.content import ContentType
from later.models.search import SearchFilters

FiltersListener: TypeAlias = Callable[[SearchFilters], None]


class SearchFiltersController:
    """Tracks content type and tag filters; ``None`` or empty clears a filter."""

    def __init__(self) -> None:
        self._filters = SearchFilters()
        self._listeners: list[FiltersListener] = []

    @property
    def filters(self) -> SearchFilters:
        return self._filters

    def subscribe(self, listener: FiltersListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def set_content_types(self, types: Iterable[ContentType] | None) -> None:
        selected = frozenset(types) if types else None
        self._update(self._filters.model_copy(update={"content_types": selected}))

    def set_tags(self, tags: Iterable[str] | None) -> None:
        cleaned = tuple(dict.fromkeys(tag.strip() for tag in tags or () if tag.strip()))
        self._update(self._filters.model_copy(update={"tags": cleaned or None}))

    def reset(self) -> None:
        self._update(SearchFilters())

    def _update(self, filters: SearchFilters) -> None:
        if filters == self._filters:
            return
        self._filters = filters
        for listener in list(self._listeners):
            listener(filters)
