"""HTML → Markdown conversion."""

from __future__ import annotations

from markdownify import ATX, markdownify


def html_to_markdown(content_html: str) -> str:
    """Convert *content_html* to Markdown.

    Headings are emitted ATX-style (``# Title``) so the chunker can split on
    them; ``<pre>`` blocks become fenced code blocks.  Pure function of its
    input.
    """
    return markdownify(content_html, heading_style=ATX, bullets="-").strip()
