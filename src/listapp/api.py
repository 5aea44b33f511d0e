"""Pure entry points consumed by the CLI and other front-ends."""

from __future__ import annotations

from datetime import datetime

from .filters import apply_filters
from .frontmatter import split_frontmatter
from .header import read_item_properties, read_list_type, read_saved_view
from .models import ListType, PropertyValue, SavedView
from .search import search
from .todos import extract_todos

__all__ = [
    "split_frontmatter",
    "parse_list_type",
    "parse_saved_view",
    "parse_item_properties",
    "extract_todos",
    "apply_filters",
    "search",
]


def parse_list_type(header: str) -> ListType:
    return read_list_type(header)


def parse_saved_view(header: str, now: datetime | None = None) -> SavedView:
    return read_saved_view(header, now=now)


def parse_item_properties(header: str) -> dict[str, PropertyValue]:
    return read_item_properties(header)
