from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

SEPARATOR = "/"
WILDCARD = "*"


@lru_cache(maxsize=256)
def _wildcard_regex(pattern: str) -> re.Pattern[str]:
    parts = [re.escape(part) for part in pattern.split(WILDCARD)]
    return re.compile("[^/]*".join(parts))


def matches(tag: str, pattern: str) -> bool:
    """True when ``tag`` matches ``pattern``; ``*`` never crosses a ``/``."""
    if WILDCARD not in pattern:
        return tag == pattern
    return _wildcard_regex(pattern).fullmatch(tag) is not None


def expand_wildcard(pattern: str, universe: Iterable[str]) -> set[str]:
    universe = set(universe)
    if WILDCARD not in pattern:
        return {pattern} if pattern in universe else set()
    return {tag for tag in universe if matches(tag, pattern)}


def descendants(tag: str, universe: Iterable[str]) -> set[str]:
    prefix = tag if tag.endswith(SEPARATOR) else tag + SEPARATOR
    return {candidate for candidate in universe if candidate.startswith(prefix)}


def ancestors(tag: str) -> list[str]:
    """All prefixes of ``tag`` from the root down to ``tag`` itself."""
    parts = tag.split(SEPARATOR)
    return [SEPARATOR.join(parts[: index + 1]) for index in range(len(parts))]
