"""YAML-style frontmatter block prepended to the Markdown body."""

from __future__ import annotations

import re

from site2md.store.models import PageMeta

_NEWLINES = re.compile(r"\r\n|\r|\n")

# Field order is part of the output format.
FIELDS = ("title", "url", "domain", "crawled_at", "content_hash", "excerpt")


def escape_value(value: str | None) -> str:
    """Make *value* safe for a double-quoted frontmatter scalar.

    Backslashes and double quotes are escaped; each newline becomes a
    single space.
    """
    text = (value or "").replace("\\", "\\\\").replace('"', '\\"')
    return _NEWLINES.sub(" ", text)


def compose(markdown_body: str, meta: PageMeta) -> str:
    """Return *markdown_body* prefixed with a ``---`` delimited metadata block."""
    values = meta.to_dict()
    lines = ["---"]
    lines.extend(f'{name}: "{escape_value(str(values[name]))}"' for name in FIELDS)
    lines.append("---")
    return "\n".join(lines) + "\n\n" + markdown_body
