"""Content type definitions shared across search, storage and filters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ContentType(StrEnum):
    """The five searchable kinds of content."""

    NOTE = "note"
    TODO_LIST = "todo_list"
    LIST = "list"
    TODO_ITEM = "todo_item"
    LIST_ITEM = "list_item"

    @property
    def display_name(self) -> str:
        return CONTENT_TABLES[self].display_name

    @property
    def is_container(self) -> bool:
        return self.parent_type is None

    @property
    def parent_type(self) -> ContentType | None:
        return CONTENT_TABLES[self].parent

    @property
    def supports_tags(self) -> bool:
        return CONTENT_TABLES[self].has_tags


@dataclass(frozen=True)
class ContentTable:
    """Storage metadata for one content type."""

    table: str
    display_name: str
    title_column: str
    body_column: str | None = None
    has_tags: bool = False
    parent: ContentType | None = None
    parent_key: str | None = None


CONTENT_TABLES: dict[ContentType, ContentTable] = {
    ContentType.NOTE: ContentTable("notes", "Note", "title", "content", has_tags=True),
    ContentType.TODO_LIST: ContentTable("todo_lists", "Todo List", "name", "description"),
    ContentType.LIST: ContentTable("lists", "List", "name"),
    ContentType.TODO_ITEM: ContentTable(
        "todo_items",
        "Todo Item",
        "title",
        "description",
        has_tags=True,
        parent=ContentType.TODO_LIST,
        parent_key="todo_list_id",
    ),
    ContentType.LIST_ITEM: ContentTable(
        "list_items",
        "List Item",
        "title",
        "notes",
        parent=ContentType.LIST,
        parent_key="list_id",
    ),
}

ALL_CONTENT_TYPES: tuple[ContentType, ...] = tuple(ContentType)


def parse_content_type(value: str) -> ContentType:
    """Parse a content type from its value, accepting camelCase and dashes."""
    normalized = value.strip()
    for content_type in ContentType:
        if normalized in {
            content_type.value,
            content_type.value.replace("_", "-"),
            _camel(content_type.value),
        }:
            return content_type
    msg = f"Unknown content type: {value!r}"
    raise ValueError(msg)


def _camel(value: str) -> str:
    head, *rest = value.split("_")
    return head + "".join(part.title() for part in rest)
