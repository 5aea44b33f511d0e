"""Reader and writer for the restricted YAML subset used in document headers.

Only three shapes are understood:

* scalar lines ``key: value`` (optionally quoted),
* inline arrays ``key: [a, b, "c"]``,
* a block opened by an anchor line such as ``fields:`` or ``filters:``, holding
  either ``- key: value`` list entries with indented siblings or plain
  indented ``key: value`` lines.

Anything else is ignored. Parsing happens in three steps: the header is split
into lines, each line is classified, and the classified lines are folded into
a :class:`HeaderDocument` that the typed readers consume.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum

from .coerce import NUMBER_RE, QUOTES, coerce
from .dates import resolve_date
from .errors import InvalidFieldType, MissingRequiredField
from .models import (
    DisplayStyle,
    FieldDefinition,
    FieldType,
    ListType,
    PropertyValue,
    SavedView,
    ViewFilters,
)

logger = logging.getLogger(__name__)

LIST_TYPE_MARKER = "list_type"
VIEW_MARKER = "view"


class LineKind(Enum):
    BLANK = "blank"
    COMMENT = "comment"
    SCALAR = "scalar"
    ANCHOR = "anchor"
    LIST_ITEM = "list_item"
    OTHER = "other"


@dataclass
class HeaderLine:
    kind: LineKind
    indent: int
    key: str | None = None
    value: str | None = None
    raw_value: str | None = None


@dataclass
class HeaderDocument:
    scalars: list[tuple[str, str]] = field(default_factory=list)
    raw_scalars: list[tuple[str, str]] = field(default_factory=list)
    blocks: dict[str, list[HeaderLine]] = field(default_factory=dict)

    def scalar(self, key: str) -> str | None:
        for name, value in self.scalars:
            if name == key:
                return value
        return None

    def mapping(self, anchor: str) -> dict[str, str]:
        """Plain ``key: value`` lines of a block; the first occurrence wins."""
        result: dict[str, str] = {}
        for line in self.blocks.get(anchor, []):
            if line.kind is LineKind.SCALAR and line.key not in result:
                result[line.key] = line.value
        return result

    def entries(self, anchor: str) -> list[dict[str, str]]:
        """``- key: value`` entries of a block with their indented siblings."""
        entries: list[dict[str, str]] = []
        current: dict[str, str] | None = None
        item_indent = 0
        for line in self.blocks.get(anchor, []):
            if line.kind is LineKind.LIST_ITEM:
                current = {}
                entries.append(current)
                item_indent = line.indent
                if line.key:
                    current[line.key] = line.value or ""
                continue
            if current is None:
                continue
            if line.kind is LineKind.BLANK or line.indent <= item_indent:
                current = None
                continue
            if line.kind is LineKind.SCALAR:
                current.setdefault(line.key, line.value)
        return entries


def unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTES:
        return value[1:-1]
    return value


def _split_key_value(text: str) -> tuple[str, str] | None:
    key, sep, value = text.partition(":")
    key = key.strip()
    if not sep or not key:
        return None
    return key, value.strip()


def classify_line(raw: str) -> HeaderLine:
    stripped = raw.strip()
    indent = len(raw) - len(raw.lstrip())
    if not stripped:
        return HeaderLine(LineKind.BLANK, indent)
    if stripped.startswith("#"):
        return HeaderLine(LineKind.COMMENT, indent)
    if stripped == "-" or stripped.startswith("- "):
        pair = _split_key_value(stripped[1:])
        if pair is None:
            return HeaderLine(LineKind.LIST_ITEM, indent)
        return HeaderLine(LineKind.LIST_ITEM, indent, pair[0], unquote(pair[1]))
    pair = _split_key_value(stripped)
    if pair is None:
        return HeaderLine(LineKind.OTHER, indent)
    key, value = pair
    if not value:
        return HeaderLine(LineKind.ANCHOR, indent, key)
    return HeaderLine(LineKind.SCALAR, indent, key, unquote(value), value)


def parse_header(header: str) -> HeaderDocument:
    lines = [classify_line(raw) for raw in header.split("\n")]
    document = HeaderDocument()
    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1
        if line.kind is LineKind.SCALAR:
            document.scalars.append((line.key, line.value))
            document.raw_scalars.append((line.key, line.raw_value))
        elif line.kind is LineKind.ANCHOR:
            block: list[HeaderLine] = []
            while index < len(lines):
                candidate = lines[index]
                if candidate.kind in (LineKind.BLANK, LineKind.COMMENT):
                    block.append(candidate)
                elif candidate.indent > line.indent:
                    block.append(candidate)
                elif candidate.kind is LineKind.LIST_ITEM and candidate.indent == line.indent:
                    block.append(candidate)
                else:
                    break
                index += 1
            document.blocks.setdefault(line.key, block)
            if all(entry.kind in (LineKind.BLANK, LineKind.COMMENT) for entry in block):
                # an anchor with nothing beneath it is an empty scalar
                document.scalars.append((line.key, ""))
                document.raw_scalars.append((line.key, ""))
        elif line.kind is LineKind.OTHER:
            logger.debug("Ignoring unrecognised header line at indent %d", line.indent)
    return document


def parse_array(value: str | None) -> list[str] | None:
    """Parse ``[a, b, "c"]``; an empty array counts as absent."""
    if value is None:
        return None
    value = value.strip()
    if not (value.startswith("[") and value.endswith("]")):
        return None
    items = [item.strip().strip(QUOTES) for item in value[1:-1].split(",")]
    items = [item for item in items if item]
    return items or None


def _parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def _parse_number(value: str | None) -> float | None:
    if value is None or not NUMBER_RE.fullmatch(value.strip()):
        return None
    return float(value)


def read_list_type(header: str) -> ListType:
    document = parse_header(header)
    name = document.scalar("name")
    if not name:
        raise MissingRequiredField("name")

    fields: list[FieldDefinition] = []
    for entry in document.entries("fields"):
        field_name = entry.get("name")
        type_name = entry.get("type")
        if not field_name or type_name is None:
            logger.debug("Discarding field entry without name or type: %r", entry)
            continue
        try:
            field_type = FieldType(type_name)
        except ValueError:
            logger.debug("Discarding field %r with unknown type %r", field_name, type_name)
            continue
        fields.append(
            FieldDefinition(
                name=field_name,
                type=field_type,
                required=_parse_bool(entry.get("required")) or False,
                min=_parse_number(entry.get("min")),
                max=_parse_number(entry.get("max")),
            )
        )

    return ListType(
        name=name,
        fields=fields,
        llm_extraction_prompt=document.scalar("llmExtractionPrompt"),
    )


def read_saved_view(header: str, now: datetime | None = None) -> SavedView:
    """Read a saved view; relative ``due_*`` tokens resolve against ``now``."""
    document = parse_header(header)
    name = document.scalar("name")
    if not name:
        raise MissingRequiredField("name")

    raw_style = document.scalar("display_style")
    if raw_style is None:
        display_style = DisplayStyle.LIST
    else:
        try:
            display_style = DisplayStyle(raw_style)
        except ValueError:
            raise InvalidFieldType("display_style", expected="list|card", got=raw_style) from None

    if now is None:
        now = datetime.now()
    raw_filters = document.mapping("filters")
    due_before = raw_filters.get("due_before")
    due_after = raw_filters.get("due_after")
    filters = ViewFilters(
        tags=parse_array(raw_filters.get("tags")),
        item_types=parse_array(raw_filters.get("item_types")),
        completed=_parse_bool(raw_filters.get("completed")),
        folders=parse_array(raw_filters.get("folders")),
        due_before=resolve_date(due_before, now) if due_before else None,
        due_after=resolve_date(due_after, now) if due_after else None,
    )
    return SavedView(name=name, display_style=display_style, filters=filters)


def read_item_properties(header: str) -> dict[str, PropertyValue]:
    properties: dict[str, PropertyValue] = {}
    for key, value in parse_header(header).raw_scalars:
        if key == "type":
            continue
        properties[key] = coerce(value)
    return properties


def document_type(header: str) -> str | None:
    return parse_header(header).scalar("type")


def _quote(value: str) -> str:
    needs_quotes = (
        not value
        or value != value.strip()
        or value[0] in QUOTES + "[#-"
        or (len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTES)
    )
    if not needs_quotes:
        return value
    if '"' in value:
        return f"'{value}'"
    return f'"{value}"'


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _format_moment(value: datetime) -> str:
    if value.time() == time(0, 0) and value.tzinfo is None:
        return date(value.year, value.month, value.day).isoformat()
    return value.isoformat()


def _format_array(values: list[str]) -> str:
    return "[" + ", ".join(values) + "]"


def render_list_type(list_type: ListType) -> str:
    lines = [f"type: {LIST_TYPE_MARKER}", f"name: {_quote(list_type.name)}"]
    if list_type.llm_extraction_prompt is not None:
        lines.append(f"llmExtractionPrompt: {_quote(list_type.llm_extraction_prompt)}")
    if list_type.fields:
        lines.append("fields:")
        for definition in list_type.fields:
            lines.append(f"  - name: {_quote(definition.name)}")
            lines.append(f"    type: {definition.type.value}")
            lines.append(f"    required: {'true' if definition.required else 'false'}")
            if definition.min is not None:
                lines.append(f"    min: {_format_number(definition.min)}")
            if definition.max is not None:
                lines.append(f"    max: {_format_number(definition.max)}")
    return "\n".join(lines)


def render_saved_view(view: SavedView) -> str:
    lines = [
        f"type: {VIEW_MARKER}",
        f"name: {_quote(view.name)}",
        f"display_style: {view.display_style.value}",
    ]
    filters = view.filters
    filter_lines = []
    if filters.tags:
        filter_lines.append(f"  tags: {_format_array(filters.tags)}")
    if filters.item_types:
        filter_lines.append(f"  item_types: {_format_array(filters.item_types)}")
    if filters.completed is not None:
        filter_lines.append(f"  completed: {'true' if filters.completed else 'false'}")
    if filters.folders:
        filter_lines.append(f"  folders: {_format_array(filters.folders)}")
    if filters.due_before is not None:
        filter_lines.append(f"  due_before: {_format_moment(filters.due_before)}")
    if filters.due_after is not None:
        filter_lines.append(f"  due_after: {_format_moment(filters.due_after)}")
    if filter_lines:
        lines.append("filters:")
        lines.extend(filter_lines)
    return "\n".join(lines)
