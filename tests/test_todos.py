from datetime import datetime

from listapp.models import DateValue, TextValue
from listapp.todos import clean_title, extract_due_date, extract_priority, extract_tags, extract_todos

NOW = datetime(2024, 3, 1, 8, 0)


def test_extract_single_todo_with_metadata():
    items = extract_todos("- [ ] Buy milk #home 📅 2024-03-15 ⏫", "f.md")
    assert len(items) == 1
    item = items[0]
    assert item.title == "Buy milk"
    assert item.tags == ["home"]
    assert item.kind == "todo"
    assert item.properties["priority"] == TextValue(value="high")
    assert item.properties["dueDate"] == DateValue(value=datetime(2024, 3, 15))
    assert item.completed is False
    assert item.source_location == "f.md"


def test_completed_checkbox():
    assert extract_todos("- [x] Done", "f.md")[0].completed is True
    assert extract_todos("* [X] Done", "f.md")[0].completed is True
    assert extract_todos("- [-] Cancelled", "f.md")[0].completed is False


def test_empty_todo_is_dropped():
    assert extract_todos("- [ ]", "f.md") == []
    assert extract_todos("- [ ] #only/tags ⏫", "f.md") == []


def test_code_fence_content_is_ignored():
    body = "\n".join(
        [
            "- [ ] Before",
            "```",
            "- [ ] Inside fence",
            "```",
            "- [x] After",
        ]
    )
    titles = [item.title for item in extract_todos(body, "f.md")]
    assert titles == ["Before", "After"]


def test_multi_line_todo_and_flush_rules():
    body = "\n".join(
        [
            "Intro paragraph",
            "- [ ] Write report #work",
            "  with the appendix #work/docs",
            "",
            "  - [ ] Nested task 🔽",
        ]
    )
    items = extract_todos(body, "notes/f.md")
    assert [item.title for item in items] == ["Write report\nwith the appendix", "Nested task"]
    assert items[0].tags == ["work", "work/docs"]
    assert items[1].properties == {"priority": TextValue(value="low")}


def test_duplicate_tags_collapse():
    item = extract_todos("- [ ] Call #home #phone #home", "f.md")[0]
    assert item.tags == ["home", "phone"]


def test_item_ids_are_stable_across_parses():
    body = "- [ ] One\n- [ ] Two"
    first = [item.id for item in extract_todos(body, "f.md")]
    second = [item.id for item in extract_todos(body, "f.md")]
    assert first == second
    assert len(set(first)) == 2


def test_now_sets_timestamps():
    item = extract_todos("- [ ] One", "f.md", now=NOW)[0]
    assert item.created_at == NOW
    assert item.updated_at == NOW


def test_due_date_variants():
    assert extract_due_date("📅2024-03-15") == datetime(2024, 3, 15)
    assert extract_due_date("📅 2024-03-15T14:30") == datetime(2024, 3, 15, 14, 30)
    assert extract_due_date("📅 2024-03-15T25:30") == datetime(2024, 3, 15)
    assert extract_due_date("📅 2024-02-30") is None
    assert extract_due_date("📅 2024-01-02 📅 2024-05-06") == datetime(2024, 1, 2)
    assert extract_due_date("no date") is None


def test_priority_markers():
    assert extract_priority("a 🔽 b ⏫") == "high"
    assert extract_priority("a 🔼") == "medium"
    assert extract_priority("plain") is None


def test_tags_and_title_cleaning():
    assert extract_tags("#a and #b/c_d and # not") == ["a", "b/c_d"]
    assert clean_title("Ship it #work 📅 2024-03-15T09:00 🔼") == "Ship it"
