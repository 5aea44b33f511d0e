from __future__ import annotations


class HeaderParseError(ValueError):
    """Base class for rejected ListType / SavedView headers."""


class MissingRequiredField(HeaderParseError):
    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Missing required field: {field_name}")


class InvalidFieldType(HeaderParseError):
    def __init__(self, field_name: str, expected: str, got: str) -> None:
        self.field_name = field_name
        self.expected = expected
        self.got = got
        super().__init__(f"Invalid value for {field_name}: expected {expected}, got {got!r}")
