from __future__ import annotations

import json
from pathlib import Path
from typing import Any

EXCLUDED_NAMES = {".obsidian", ".git", ".DS_Store", "node_modules", ".venv"}
MARKDOWN_SUFFIXES = {".md", ".markdown"}


def _is_excluded(path: Path, root: Path) -> bool:
    return any(part in EXCLUDED_NAMES for part in path.relative_to(root).parts)


def scan_markdown(root: Path, recursive: bool = True) -> list[Path]:
    pattern = "**/*" if recursive else "*"
    return sorted(
        path
        for path in root.glob(pattern)
        if path.is_file() and path.suffix.lower() in MARKDOWN_SUFFIXES and not _is_excluded(path, root)
    )


def read_documents(root: Path, recursive: bool = True) -> list[tuple[str, str]]:
    return [(str(path), path.read_text(encoding="utf-8")) for path in scan_markdown(root, recursive)]


def read_document(path: Path) -> tuple[str, str]:
    return str(path), path.read_text(encoding="utf-8")


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
