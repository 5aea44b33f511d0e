from __future__ import annotations

from datetime import datetime
from typing import Iterable

from .models import Item, ViewFilters
from .tags import WILDCARD, expand_wildcard


def expand_tags(patterns: Iterable[str], universe: Iterable[str]) -> set[str]:
    universe = set(universe)
    expanded: set[str] = set()
    for pattern in patterns:
        if WILDCARD in pattern:
            expanded |= expand_wildcard(pattern, universe)
        else:
            expanded.add(pattern)
    return expanded


def _folder_segments(path: str) -> list[str]:
    return [segment for segment in path.replace("\\", "/").split("/") if segment]


def in_folder(source_location: str, folder: str) -> bool:
    """True when ``folder`` names consecutive directories of ``source_location``."""
    wanted = _folder_segments(folder)
    directories = _folder_segments(source_location)[:-1]
    if not wanted:
        return False
    for start in range(len(directories) - len(wanted) + 1):
        if directories[start : start + len(wanted)] == wanted:
            return True
    return False


def _due_before(item: Item, moment: datetime) -> bool:
    due = item.due_date()
    return due is not None and due < moment


def _due_after(item: Item, moment: datetime) -> bool:
    due = item.due_date()
    return due is not None and due > moment


def apply_filters(filters: ViewFilters, items: list[Item]) -> list[Item]:
    """Keep the items matching every configured axis, in their original order."""
    filtered = list(items)

    if filters.tags:
        wanted = expand_tags(filters.tags, {tag for item in filtered for tag in item.tags})
        filtered = [item for item in filtered if any(tag in wanted for tag in item.tags)]

    if filters.item_types:
        kinds = set(filters.item_types)
        filtered = [item for item in filtered if item.kind in kinds]

    if filters.completed is not None:
        filtered = [item for item in filtered if item.completed == filters.completed]

    if filters.due_before is not None:
        filtered = [item for item in filtered if _due_before(item, filters.due_before)]

    if filters.due_after is not None:
        filtered = [item for item in filtered if _due_after(item, filters.due_after)]

    if filters.folders:
        filtered = [
            item
            for item in filtered
            if any(in_folder(item.source_location, folder) for folder in filters.folders)
        ]

    return filtered
