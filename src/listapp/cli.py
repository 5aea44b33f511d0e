from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from .api import apply_filters, search, split_frontmatter
from .dates import resolve_date
from .header import document_type, read_item_properties
from .models import ViewFilters, property_to_string
from .storage import dump_json, read_document, read_documents
from .views import apply_view, find_view, load_views
from .vault import parse_document, parse_documents, summarize

app = typer.Typer(help="Markdown todo and note query CLI")
console = Console()
err_console = Console(stderr=True)

VIEWS_FOLDER = "views"


def _load_dotenv() -> None:
    import importlib.util
    import importlib

    if importlib.util.find_spec("dotenv") is None:
        return
    dotenv = importlib.import_module("dotenv")
    dotenv.load_dotenv()


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv("LISTAPP_LOG_LEVEL", "WARNING")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def _resolve_vault(vault: Path | None) -> Path:
    if vault is None:
        env_vault = os.getenv("LISTAPP_VAULT")
        if not env_vault:
            raise typer.BadParameter("Pass a vault path or set LISTAPP_VAULT.")
        vault = Path(env_vault)
    if not vault.is_dir():
        raise typer.BadParameter(f"Vault path is not a directory: {vault}")
    return vault


def _parse_due(value: str | None, now: datetime, option: str) -> datetime | None:
    if value is None:
        return None
    resolved = resolve_date(value, now)
    if resolved is None:
        raise typer.BadParameter(f"{option} must be a date like 2024-03-10 or a token like +7d")
    return resolved


def _emit(data: Any) -> None:
    console.print(dump_json(data), soft_wrap=True, markup=False, highlight=False, emoji=False)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    _load_dotenv()
    _configure_logging(verbose)


@app.command()
def scan(vault: Path | None = typer.Argument(None, help="Vault directory")) -> None:
    """Count the items found in a vault."""
    root = _resolve_vault(vault)
    documents = read_documents(root)
    items = parse_documents(documents)
    _emit({"vault_path": str(root), **summarize(documents, items)})


@app.command("list")
def list_items(
    vault: Path | None = typer.Argument(None, help="Vault directory"),
    tag: list[str] = typer.Option(None, "--tag", help="Tag or wildcard pattern like work/*"),
    item_type: list[str] = typer.Option(None, "--type", help="Item type, e.g. todo"),
    completed: bool | None = typer.Option(None, "--completed/--open", help="Completion status"),
    folder: list[str] = typer.Option(None, "--folder", help="Folder name"),
    due_before: str | None = typer.Option(None, "--due-before", help="Date or token like +7d"),
    due_after: str | None = typer.Option(None, "--due-after", help="Date or token like -7d"),
) -> None:
    """List items matching the given filters."""
    root = _resolve_vault(vault)
    now = datetime.now()
    filters = ViewFilters(
        tags=tag or None,
        item_types=item_type or None,
        completed=completed,
        folders=folder or None,
        due_before=_parse_due(due_before, now, "--due-before"),
        due_after=_parse_due(due_after, now, "--due-after"),
    )
    items = parse_documents(read_documents(root), now)
    _emit([item.to_summary() for item in apply_filters(filters, items)])


@app.command("search")
def search_items(
    query: str = typer.Argument(..., help="Text to search for"),
    vault: Path | None = typer.Argument(None, help="Vault directory"),
    limit: int | None = typer.Option(None, "--limit", help="Maximum number of results"),
) -> None:
    """Search titles, tags and properties."""
    root = _resolve_vault(vault)
    results = search(query, parse_documents(read_documents(root)))
    if limit is not None:
        results = results[:limit]
    _emit(
        [
            {
                "item": result.item.to_summary(),
                "score": result.score,
                "matches": [
                    {"field": match.field, "range": [match.start, match.length]} for match in result.matches
                ],
            }
            for result in results
        ]
    )


@app.command("apply-view")
def apply_view_command(
    name: str = typer.Argument(..., help="View name"),
    vault: Path | None = typer.Argument(None, help="Vault directory"),
) -> None:
    """Apply a saved view from the vault's views folder."""
    root = _resolve_vault(vault)
    now = datetime.now()
    views_dir = root / VIEWS_FOLDER
    views = load_views(read_documents(views_dir, recursive=False), now) if views_dir.is_dir() else []
    view = find_view(views, name)
    if view is None:
        raise typer.BadParameter(f"View '{name}' not found")
    items = parse_documents(read_documents(root), now)
    _emit([item.to_summary() for item in apply_view(view, items)])


@app.command()
def parse(path: Path = typer.Argument(..., help="Markdown file")) -> None:
    """Show what a single file parses into."""
    if not path.is_file():
        raise typer.BadParameter(f"File not found: {path}")
    location, text = read_document(path)
    header, _ = split_frontmatter(text)
    parsed = parse_document(location, text)
    result: dict[str, Any] = {
        "file": location,
        "has_frontmatter": header is not None,
        "items_count": len(parsed.items),
        "items": [item.to_summary() for item in parsed.items],
    }
    if header is not None:
        result["type"] = document_type(header)
        result["properties"] = {
            key: property_to_string(value) for key, value in read_item_properties(header).items()
        }
    _emit(result)


@app.command("list-views")
def list_views(vault: Path | None = typer.Argument(None, help="Vault directory")) -> None:
    """List saved views in the vault's views folder."""
    root = _resolve_vault(vault)
    views_dir = root / VIEWS_FOLDER
    if not views_dir.is_dir():
        _emit([])
        return
    views = load_views(read_documents(views_dir, recursive=False), datetime.now())
    _emit(
        [
            {
                "name": view.name,
                "display_style": view.display_style.value,
                "filters": view.filters.model_dump(mode="json", exclude_none=True),
            }
            for view in views
        ]
    )


if __name__ == "__main__":
    app()
