from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TextValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    value: str


class NumberValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["number"] = "number"
    value: float


class DateValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["date"] = "date"
    value: datetime


class BoolValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["bool"] = "bool"
    value: bool


PropertyValue = Annotated[
    Union[TextValue, NumberValue, DateValue, BoolValue],
    Field(discriminator="type"),
]


def property_to_string(value: TextValue | NumberValue | DateValue | BoolValue) -> str:
    """Render a property value the way search and the CLI show it."""
    if isinstance(value, TextValue):
        return value.value
    if isinstance(value, NumberValue):
        return str(value.value)
    if isinstance(value, DateValue):
        return value.value.isoformat()
    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    raise TypeError(f"Unknown property value: {value!r}")


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: str
    title: str
    properties: dict[str, PropertyValue] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    completed: bool = False
    source_location: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("title")
    @classmethod
    def _title_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Item title must not be empty")
        return value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    def updated(self, **changes: Any) -> Item:
        """Return a copy with ``changes`` applied, keeping the same id."""
        changes.setdefault("updated_at", datetime.now())
        changes.pop("id", None)
        return self.model_validate({**self.model_dump(), **changes})

    def due_date(self) -> datetime | None:
        value = self.properties.get("dueDate")
        if isinstance(value, DateValue):
            return value.value
        return None

    def to_summary(self) -> dict[str, Any]:
        summary: dict[str, Any] = {
            "id": self.id,
            "type": self.kind,
            "title": self.title,
            "tags": list(self.tags),
            "completed": self.completed,
            "source_file": self.source_location,
        }
        due = self.due_date()
        if due is not None:
            summary["due"] = due.isoformat()
        if self.properties:
            summary["properties"] = {
                name: property_to_string(value) for name, value in self.properties.items()
            }
        return summary


class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


class FieldDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: FieldType
    required: bool = False
    min: float | None = None
    max: float | None = None


class ListType(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    fields: list[FieldDefinition] = Field(default_factory=list)
    llm_extraction_prompt: str | None = None

    def validate_properties(self, properties: dict[str, Any]) -> list[str]:
        """Check ``properties`` against the field definitions.

        Returns a list of human-readable problems; an empty list means the
        properties satisfy the schema. Properties with no matching field are
        allowed.
        """
        problems: list[str] = []
        for field in self.fields:
            value = properties.get(field.name)
            if value is None:
                if field.required:
                    problems.append(f"{field.name}: required field is missing")
                continue
            expected = {
                FieldType.TEXT: TextValue,
                FieldType.NUMBER: NumberValue,
                FieldType.DATE: DateValue,
            }[field.type]
            if not isinstance(value, expected):
                problems.append(f"{field.name}: expected {field.type.value}, got {value.type}")
                continue
            if isinstance(value, NumberValue):
                if field.min is not None and value.value < field.min:
                    problems.append(f"{field.name}: {value.value} is below minimum {field.min}")
                if field.max is not None and value.value > field.max:
                    problems.append(f"{field.name}: {value.value} is above maximum {field.max}")
        return problems


class DisplayStyle(str, Enum):
    LIST = "list"
    CARD = "card"


class ViewFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    tags: list[str] | None = None
    item_types: list[str] | None = None
    due_before: datetime | None = None
    due_after: datetime | None = None
    completed: bool | None = None
    folders: list[str] | None = None


class SavedView(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    display_style: DisplayStyle = DisplayStyle.LIST
    filters: ViewFilters = Field(default_factory=ViewFilters)


class Match(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: Item
    score: float
    matches: list[Match] = Field(default_factory=list)
