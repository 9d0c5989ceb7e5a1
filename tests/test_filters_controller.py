"""Tests for the search filters controller."""

from __future__ import annotations

from later.controllers.filters_controller import SearchFiltersController
from later.models.content import ContentType
from later.models.search import SearchFilters


def test_set_and_clear_content_types() -> None:
    controller = SearchFiltersController()
    controller.set_content_types([ContentType.NOTE, ContentType.TODO_ITEM])
    assert controller.filters.content_types == frozenset({ContentType.NOTE, ContentType.TODO_ITEM})
    assert controller.filters.has_active_filters

    controller.set_content_types([])
    assert controller.filters.content_types is None
    controller.set_content_types([ContentType.LIST])
    controller.set_content_types(None)
    assert controller.filters.content_types is None


def test_set_tags_strips_and_deduplicates() -> None:
    controller = SearchFiltersController()
    controller.set_tags([" work ", "home", "work", "  "])
    assert controller.filters.tags == ("work", "home")
    controller.set_tags(None)
    assert controller.filters.tags is None


def test_reset_and_notifications() -> None:
    controller = SearchFiltersController()
    seen: list[SearchFilters] = []
    unsubscribe = controller.subscribe(seen.append)

    controller.set_tags(["work"])
    controller.set_tags(["work"])
    controller.reset()
    assert controller.filters == SearchFilters()
    assert len(seen) == 2

    unsubscribe()
    controller.set_tags(["home"])
    assert len(seen) == 2
