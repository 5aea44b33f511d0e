from __future__ import annotations

DELIMITER = "---"


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split ``text`` into (header, body).

    The header is only recognised when the very first line is ``---`` and a
    later line is exactly ``---``. Without a closing delimiter the document has
    no header and the body is the original text.
    """
    lines = text.split("\n")
    if not lines or lines[0] != DELIMITER:
        return None, text
    for index in range(1, len(lines)):
        if lines[index] == DELIMITER:
            header = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1 :])
            return header, body
    return None, text


def join_frontmatter(header: str, body: str = "") -> str:
    return f"{DELIMITER}\n{header}\n{DELIMITER}\n{body}"
