"""Weighted substring search over items.

Weights per occurrence: title 10 when the query is the whole title and 5
otherwise, tag 3, property value 2, and 1 more for every title occurrence as
general content.
"""

from __future__ import annotations

import re

from .models import Item, Match, SearchResult, property_to_string

TITLE_EXACT_WEIGHT = 10
TITLE_CONTAINS_WEIGHT = 5
TAG_WEIGHT = 3
PROPERTY_WEIGHT = 2
CONTENT_WEIGHT = 1


def find_occurrences(text: str, query: str) -> list[tuple[int, int]]:
    """Non-overlapping (start, end) ranges of ``query`` in ``text``, ignoring case."""
    return [match.span() for match in re.finditer(re.escape(query), text, re.IGNORECASE)]


def score_item(item: Item, query: str) -> SearchResult | None:
    matches: list[Match] = []
    score = 0.0

    title_hits = find_occurrences(item.title, query)
    if title_hits:
        matches.extend(Match(field="title", start=start, end=end) for start, end in title_hits)
        weight = TITLE_EXACT_WEIGHT if item.title.lower() == query else TITLE_CONTAINS_WEIGHT
        score += len(title_hits) * weight

    for tag in item.tags:
        tag_hits = find_occurrences(tag, query)
        matches.extend(Match(field="tags", start=start, end=end) for start, end in tag_hits)
        score += len(tag_hits) * TAG_WEIGHT

    for name, value in item.properties.items():
        value_hits = find_occurrences(property_to_string(value), query)
        matches.extend(Match(field=name, start=start, end=end) for start, end in value_hits)
        score += len(value_hits) * PROPERTY_WEIGHT

    score += len(title_hits) * CONTENT_WEIGHT

    if score <= 0:
        return None
    return SearchResult(item=item, score=score, matches=matches)


def search(query: str, items: list[Item]) -> list[SearchResult]:
    if not query:
        return []
    lowered = query.lower()
    results = []
    for item in items:
        result = score_item(item, lowered)
        if result is not None:
            results.append(result)
    return sorted(results, key=lambda result: result.score, reverse=True)
