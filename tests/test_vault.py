from datetime import datetime, timedelta

from listapp.models import NumberValue, TextValue
from listapp.vault import load_list_types, parse_document, parse_documents, summarize
from listapp.views import apply_view, find_view, load_views, validate_view
from listapp.models import SavedView, ViewFilters

NOW = datetime(2024, 3, 1, 9, 0)

DOCUMENTS = [
    (
        "vault/books/dune.md",
        "---\ntype: book\ntitle: Dune\nauthor: Frank Herbert\npages: 412\ntags: [reading, scifi]\n---\n"
        "- [ ] Finish part two #reading 📅 2024-03-04\n",
    ),
    ("vault/inbox.md", "# Inbox\n- [ ] Call plumber #home 🔼\n- [x] Pay rent #home\n"),
    ("vault/types/book.md", "---\ntype: list_type\nname: Book\nfields:\n  - name: pages\n    type: number\n---\n"),
    ("vault/types/broken.md", "---\ntype: list_type\nfields:\n---\n"),
    ("vault/views/home.md", "---\ntype: view\nname: Home\nfilters:\n  tags: [home]\n  completed: false\n---\n"),
    ("vault/views/soon.md", "---\ntype: view\nname: Soon\nfilters:\n  due_before: +7d\n---\n"),
    ("vault/views/bad.md", "---\ntype: view\nname: Bad\ndisplay_style: grid\n---\n"),
    ("vault/views/not-a-view.md", "---\nname: Loose\n---\n"),
]


def test_parse_document_builds_note_and_todos():
    parsed = parse_document(*DOCUMENTS[0], now=NOW)
    note, todo = parsed.items
    assert note.kind == "book"
    assert note.title == "Dune"
    assert note.tags == ["reading", "scifi"]
    assert note.properties == {"author": TextValue(value="Frank Herbert"), "pages": NumberValue(value=412.0)}
    assert todo.title == "Finish part two"
    assert todo.created_at == NOW


def test_parse_documents_and_summary():
    items = parse_documents(DOCUMENTS, now=NOW)
    assert [item.title for item in items] == ["Dune", "Finish part two", "Call plumber", "Pay rent"]
    assert summarize(DOCUMENTS, items) == {
        "total_files": len(DOCUMENTS),
        "total_items": 4,
        "items_by_type": {"book": 1, "todo": 3},
        "completed": 1,
    }


def test_load_list_types_skips_invalid(caplog):
    list_types = load_list_types(DOCUMENTS)
    assert [list_type.name for list_type in list_types] == ["Book"]
    assert "vault/types/broken.md" in caplog.text


def test_load_views_and_apply():
    views = load_views(DOCUMENTS, NOW)
    assert [view.name for view in views] == ["Home", "Soon"]
    items = parse_documents(DOCUMENTS, now=NOW)

    home = find_view(views, "Home")
    assert [item.title for item in apply_view(home, items)] == ["Call plumber"]

    soon = find_view(views, "Soon")
    assert soon.filters.due_before == NOW + timedelta(days=7)
    assert [item.title for item in apply_view(soon, items)] == ["Finish part two"]

    assert find_view(views, "Missing") is None


def test_validate_view():
    assert validate_view(SavedView(name="ok", filters=ViewFilters(tags=["a"]))) == []
    problems = validate_view(
        SavedView(
            name="bad",
            filters=ViewFilters(
                tags=[""],
                folders=[""],
                due_before=datetime(2024, 1, 1),
                due_after=datetime(2024, 2, 1),
            ),
        )
    )
    assert problems == [
        "tags: tag cannot be empty",
        "folders: folder path cannot be empty",
        "due_after must be earlier than due_before",
    ]
