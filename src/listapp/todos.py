"""Checkbox todo extraction from markdown bodies.

The scanner is a small state machine. Outside code fences a checkbox line
(``- [ ]`` / ``* [x]``) starts a todo; following non-blank lines continue it
until the next checkbox, a code fence, or the end of the document. Every
finished todo goes through :func:`build_todo`, which pulls tags, the due date
and the priority out of the text.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .dates import parse_iso_date
from .models import DateValue, Item, PropertyValue, TextValue

logger = logging.getLogger(__name__)

TODO_KIND = "todo"
DUE_PROPERTY = "dueDate"
PRIORITY_PROPERTY = "priority"

ITEM_NAMESPACE = uuid.UUID("8f7c1e0a-3b52-4c4e-9d5e-2a6f0b9c1d47")

CHECKBOX_RE = re.compile(r"^\s*[-*]\s+\[(.)\]")
CHECKBOX_PREFIX_RE = re.compile(r"^\s*[-*]\s+\[.\]\s*")
TAG_RE = re.compile(r"#([\w/]+)")
DUE_RE = re.compile(r"📅\s*([0-9]{4}-[0-9]{2}-[0-9]{2})(?:T([0-9]{2}):([0-9]{2}))?")
PRIORITY_MARKERS = (("⏫", "high"), ("🔼", "medium"), ("🔽", "low"))
PRIORITY_RE = re.compile("[" + "".join(marker for marker, _ in PRIORITY_MARKERS) + "]")
FENCE = "```"


class ScanState(Enum):
    SCANNING = "scanning"
    IN_CODE_FENCE = "in_code_fence"
    ACCUMULATING = "accumulating"


@dataclass
class PendingTodo:
    checkbox: str
    line_number: int
    lines: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def extract_tags(text: str) -> list[str]:
    return list(dict.fromkeys(TAG_RE.findall(text)))


def extract_due_date(text: str) -> datetime | None:
    match = DUE_RE.search(text)
    if not match:
        return None
    due = parse_iso_date(match.group(1))
    if due is None:
        return None
    if match.group(2) is not None:
        try:
            return due.replace(hour=int(match.group(2)), minute=int(match.group(3)))
        except ValueError:
            logger.debug("Ignoring invalid due time in %r", match.group(0))
    return due


def extract_priority(text: str) -> str | None:
    for marker, priority in PRIORITY_MARKERS:
        if marker in text:
            return priority
    return None


def clean_title(text: str) -> str:
    title = DUE_RE.sub("", text)
    title = PRIORITY_RE.sub("", title)
    title = TAG_RE.sub("", title)
    return "\n".join(line.strip() for line in title.split("\n")).strip()


def build_todo(
    pending: PendingTodo,
    source_location: str,
    now: datetime | None = None,
) -> Item | None:
    """Turn an accumulated todo into an Item, or None when the title is empty."""
    text = pending.text
    title = clean_title(text)
    if not title:
        logger.debug("Dropping empty todo at %s:%d", source_location, pending.line_number)
        return None

    properties: dict[str, PropertyValue] = {}
    priority = extract_priority(text)
    if priority is not None:
        properties[PRIORITY_PROPERTY] = TextValue(value=priority)
    due = extract_due_date(text)
    if due is not None:
        properties[DUE_PROPERTY] = DateValue(value=due)

    timestamps = {} if now is None else {"created_at": now, "updated_at": now}
    return Item(
        id=str(uuid.uuid5(ITEM_NAMESPACE, f"{source_location}:{pending.line_number}")),
        kind=TODO_KIND,
        title=title,
        properties=properties,
        tags=extract_tags(text),
        completed="x" in pending.checkbox.lower(),
        source_location=source_location,
        **timestamps,
    )


def extract_todos(body: str, source_location: str, now: datetime | None = None) -> list[Item]:
    items: list[Item] = []
    state = ScanState.SCANNING
    pending: PendingTodo | None = None

    def flush() -> None:
        nonlocal pending
        if pending is not None:
            item = build_todo(pending, source_location, now)
            if item is not None:
                items.append(item)
        pending = None

    for line_number, line in enumerate(body.split("\n"), start=1):
        stripped = line.strip()
        if stripped.startswith(FENCE):
            if state is ScanState.IN_CODE_FENCE:
                state = ScanState.SCANNING
            else:
                flush()
                state = ScanState.IN_CODE_FENCE
            continue
        if state is ScanState.IN_CODE_FENCE:
            continue

        match = CHECKBOX_RE.match(line)
        if match:
            flush()
            pending = PendingTodo(checkbox=match.group(1), line_number=line_number)
            pending.lines.append(CHECKBOX_PREFIX_RE.sub("", line, count=1))
            state = ScanState.ACCUMULATING
        elif state is ScanState.ACCUMULATING and stripped:
            pending.lines.append(stripped)

    flush()
    return items
