from __future__ import annotations

import re

from .dates import parse_iso_date
from .models import BoolValue, DateValue, NumberValue, TextValue

NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
QUOTES = "\"'"


def coerce(raw: str) -> TextValue | NumberValue | DateValue | BoolValue:
    """Classify a raw header scalar.

    Precedence is number, then bool, then ISO date, then text. Text values
    lose their surrounding quotes.
    """
    value = raw.strip()
    if NUMBER_RE.fullmatch(value):
        return NumberValue(value=float(value))
    lowered = value.lower()
    if lowered == "true":
        return BoolValue(value=True)
    if lowered == "false":
        return BoolValue(value=False)
    parsed = parse_iso_date(value)
    if parsed is not None:
        return DateValue(value=parsed)
    return TextValue(value=value.strip(QUOTES))
