"""Data models for the fetch and extraction stages."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class RenderMode(enum.Enum):
    """How a page is retrieved."""

    STATIC = "static"
    RENDERED = "rendered"

    @property
    def flag(self) -> str:
        """Single-letter marker used in cache keys (``r`` / ``n``)."""
        return "r" if self is RenderMode.RENDERED else "n"


@dataclass(frozen=True)
class FetchedPage:
    """The retrieved document for a single URL fetch.

    ``final_url`` is the URL after redirects; everything downstream
    (domain, identity hash) is computed from it.
    """

    html: str
    final_url: str
    status_code: int


@dataclass(frozen=True)
class ArticleContent:
    """Main content extracted from a :class:`FetchedPage`."""

    title: str
    content_html: str
    excerpt: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.content_html.strip()
