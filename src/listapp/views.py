from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from .errors import HeaderParseError
from .filters import apply_filters
from .frontmatter import split_frontmatter
from .header import VIEW_MARKER, document_type, read_saved_view
from .models import Item, SavedView

logger = logging.getLogger(__name__)


def load_views(documents: Iterable[tuple[str, str]], now: datetime) -> list[SavedView]:
    """Parse every ``type: view`` document; invalid views are logged and skipped."""
    views: list[SavedView] = []
    for location, text in documents:
        header, _ = split_frontmatter(text)
        if header is None or document_type(header) != VIEW_MARKER:
            continue
        try:
            views.append(read_saved_view(header, now=now))
        except HeaderParseError as exc:
            logger.warning("Skipping view %s: %s", location, exc)
    return views


def find_view(views: Iterable[SavedView], name: str) -> SavedView | None:
    for view in views:
        if view.name == name:
            return view
    return None


def apply_view(view: SavedView, items: list[Item]) -> list[Item]:
    return apply_filters(view.filters, items)


def validate_view(view: SavedView) -> list[str]:
    problems: list[str] = []
    if not view.name:
        problems.append("name: required field is missing")
    filters = view.filters
    if filters.tags and any(not tag for tag in filters.tags):
        problems.append("tags: tag cannot be empty")
    if filters.item_types and any(not kind for kind in filters.item_types):
        problems.append("item_types: item type cannot be empty")
    if filters.folders and any(not folder for folder in filters.folders):
        problems.append("folders: folder path cannot be empty")
    if (
        filters.due_before is not None
        and filters.due_after is not None
        and filters.due_after >= filters.due_before
    ):
        problems.append("due_after must be earlier than due_before")
    return problems
