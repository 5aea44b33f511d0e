from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta

RELATIVE_RE = re.compile(r"([+-])([0-9]+)([dwmy])")
ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _add_months(moment: datetime, months: int) -> datetime:
    total = moment.year * 12 + (moment.month - 1) + months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def resolve_relative(token: str, now: datetime) -> datetime | None:
    """Resolve tokens like ``+7d``, ``-2w``, ``+1m`` or ``+1y`` against ``now``.

    Returns None for anything that is not a signed, strictly positive amount of
    days, weeks, months or years.
    """
    match = RELATIVE_RE.fullmatch(token.strip())
    if not match:
        return None
    sign, digits, unit = match.groups()
    amount = int(digits)
    if amount <= 0:
        return None
    if sign == "-":
        amount = -amount
    try:
        if unit == "d":
            return now + timedelta(days=amount)
        if unit == "w":
            return now + timedelta(weeks=amount)
        if unit == "m":
            return _add_months(now, amount)
        return _add_months(now, amount * 12)
    except (OverflowError, ValueError):
        return None


def parse_iso_date(text: str) -> datetime | None:
    """Parse a full calendar date ``YYYY-MM-DD`` (no time part) as midnight."""
    if not ISO_DATE_RE.fullmatch(text):
        return None
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        return None
    return datetime(parsed.year, parsed.month, parsed.day)


def resolve_date(text: str, now: datetime) -> datetime | None:
    """Resolve a relative token first, then an absolute ISO date or date-time."""
    value = text.strip().strip("\"'")
    if not value:
        return None
    if value[0] in "+-":
        return resolve_relative(value, now)
    parsed = parse_iso_date(value)
    if parsed is not None:
        return parsed
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed_moment = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed_moment.tzinfo is not None:
        # due dates are naive local time
        parsed_moment = parsed_moment.astimezone().replace(tzinfo=None)
    return parsed_moment
