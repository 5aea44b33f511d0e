from datetime import datetime

from listapp.models import DateValue, Item, NumberValue, TextValue
from listapp.search import search


def _item(title, tags=(), properties=None):
    return Item(kind="todo", title=title, tags=list(tags), properties=properties or {}, source_location="f.md")


def test_empty_query_returns_nothing():
    assert search("", [_item("anything")]) == []


def test_title_beats_tag_for_same_query():
    in_title = _item("Plan garden", tags=["home"])
    in_tag = _item("Plan holiday", tags=["garden"])
    results = search("garden", [in_tag, in_title])
    assert [result.item.title for result in results] == ["Plan garden", "Plan holiday"]
    assert results[0].score > results[1].score


def test_title_weights():
    exact = search("milk", [_item("Milk")])[0]
    assert exact.score == 11
    partial = search("milk", [_item("Buy milk, more milk")])[0]
    assert partial.score == 12


def test_tag_and_property_weights():
    item = _item(
        "Something",
        tags=["reading", "reading/scifi"],
        properties={
            "author": TextValue(value="Frank Herbert"),
            "pages": NumberValue(value=412.0),
            "read": DateValue(value=datetime(2024, 3, 10)),
        },
    )
    assert search("reading", [item])[0].score == 6
    assert search("herbert", [item])[0].score == 2
    assert search("412", [item])[0].score == 2
    assert search("2024-03-10", [item])[0].score == 2


def test_non_matching_items_are_excluded():
    assert search("zebra", [_item("Buy milk", tags=["home"])]) == []


def test_matches_report_each_occurrence():
    item = _item("Go go go", tags=["go"], properties={"note": TextValue(value="ago")})
    result = search("GO", [item])[0]
    assert [(match.field, match.start, match.end) for match in result.matches] == [
        ("title", 0, 2),
        ("title", 3, 5),
        ("title", 6, 8),
        ("tags", 0, 2),
        ("note", 1, 3),
    ]
    assert result.score == 3 * 5 + 3 + 2 + 3


def test_ties_keep_input_order():
    first = _item("alpha one")
    second = _item("alpha two")
    third = _item("alpha alpha")
    results = search("alpha", [first, second, third])
    assert [result.item.title for result in results] == ["alpha alpha", "alpha one", "alpha two"]


def test_search_does_not_mutate_input():
    items = [_item("b"), _item("a b")]
    snapshot = list(items)
    search("b", items)
    assert items == snapshot


def test_match_offsets_index_the_original_title():
    title = "İstanbul milk"
    results = search("MILK", [_item(title)])
    match = results[0].matches[0]
    assert title[match.start:match.end] == "milk"
    assert (match.start, match.end) == (9, 13)
