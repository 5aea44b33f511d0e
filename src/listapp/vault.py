from __future__ import annotations

import logging
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from .errors import HeaderParseError
from .frontmatter import split_frontmatter
from .header import (
    LIST_TYPE_MARKER,
    VIEW_MARKER,
    parse_array,
    parse_header,
    read_item_properties,
    read_list_type,
)
from .models import Item, ListType
from .todos import ITEM_NAMESPACE, extract_todos

logger = logging.getLogger(__name__)

NOTE_RESERVED_KEYS = {"title", "tags"}


@dataclass
class ParsedDocument:
    source_location: str
    header: str | None
    items: list[Item] = field(default_factory=list)


def build_note(header: str, source_location: str, now: datetime | None = None) -> Item | None:
    """Build a typed note item from a header with ``type`` and ``title``."""
    document = parse_header(header)
    kind = document.scalar("type")
    title = (document.scalar("title") or "").strip()
    if not kind or kind in (VIEW_MARKER, LIST_TYPE_MARKER) or not title:
        return None
    properties = {
        name: value
        for name, value in read_item_properties(header).items()
        if name not in NOTE_RESERVED_KEYS
    }
    timestamps = {} if now is None else {"created_at": now, "updated_at": now}
    return Item(
        id=str(uuid.uuid5(ITEM_NAMESPACE, f"{source_location}:header")),
        kind=kind,
        title=title,
        properties=properties,
        tags=parse_array(document.scalar("tags")) or [],
        source_location=source_location,
        **timestamps,
    )


def parse_document(source_location: str, text: str, now: datetime | None = None) -> ParsedDocument:
    header, body = split_frontmatter(text)
    parsed = ParsedDocument(source_location=source_location, header=header)
    if header is not None:
        note = build_note(header, source_location, now)
        if note is not None:
            parsed.items.append(note)
    parsed.items.extend(extract_todos(body, source_location, now))
    return parsed


def parse_documents(documents: Iterable[tuple[str, str]], now: datetime | None = None) -> list[Item]:
    items: list[Item] = []
    for source_location, text in documents:
        parsed = parse_document(source_location, text, now)
        logger.debug("Parsed %d items from %s", len(parsed.items), source_location)
        items.extend(parsed.items)
    return items


def load_list_types(documents: Iterable[tuple[str, str]]) -> list[ListType]:
    list_types: list[ListType] = []
    for source_location, text in documents:
        header, _ = split_frontmatter(text)
        if header is None or parse_header(header).scalar("type") != LIST_TYPE_MARKER:
            continue
        try:
            list_types.append(read_list_type(header))
        except HeaderParseError as exc:
            logger.warning("Skipping list type %s: %s", source_location, exc)
    return list_types


def items_by_kind(items: Iterable[Item]) -> Counter:
    counter: Counter[str] = Counter()
    for item in items:
        counter[item.kind] += 1
    return counter


def summarize(documents: list[tuple[str, str]], items: list[Item]) -> dict[str, object]:
    return {
        "total_files": len(documents),
        "total_items": len(items),
        "items_by_type": dict(items_by_kind(items)),
        "completed": sum(1 for item in items if item.completed),
    }
