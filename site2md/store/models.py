"""Records produced by the scrape pipeline and persisted by the cache.

Field names in ``to_dict`` are the wire / on-disk names used by the HTTP API
and the cache files.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import httpx

from site2md.errors import ValidationError
from site2md.scraper.models import RenderMode

MISSING_URL_MESSAGE = "Missing url query parameter. e.g. /?url=https://example.com"

# Characters that may not appear in a URL host.
_FORBIDDEN_HOST_CHARS = re.compile(r"[\s#%/<>?@\\^|]")


def _parse_target_words(value: Any, default: int) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class ScrapeRequest:
    url: str
    render_mode: RenderMode = RenderMode.RENDERED
    target_words: int = 1000
    raw_output: bool = False

    def __post_init__(self) -> None:
        validate_url(self.url)
        if self.target_words <= 0:
            raise ValueError("target_words must be a positive integer")

    @classmethod
    def from_query(
        cls,
        url: str | None,
        render: str | None = "true",
        target_words: str | int | None = None,
        raw: str | None = "false",
        default_target_words: int = 1000,
    ) -> "ScrapeRequest":
        """Build a request from loosely-typed query parameters.

        ``render`` is off only for the literal ``"false"``; ``raw`` is on only
        for ``"true"``; an unusable ``target_words`` falls back to the default.

        Raises:
            ValidationError: If *url* is missing or not an absolute http(s) URL.
        """
        if not url:
            raise ValidationError(MISSING_URL_MESSAGE)
        render_mode = (
            RenderMode.STATIC
            if str(render if render is not None else "true").lower() == "false"
            else RenderMode.RENDERED
        )
        return cls(
            url=url,
            render_mode=render_mode,
            target_words=_parse_target_words(target_words, default_target_words),
            raw_output=str(raw if raw is not None else "false").lower() == "true",
        )


def validate_url(url: str) -> None:
    """Raise :class:`ValidationError` unless *url* is an absolute http(s) URL."""
    if not url:
        raise ValidationError(MISSING_URL_MESSAGE)
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        parts.port  # raises ValueError when out of range
        httpx.URL(url)
    except (ValueError, httpx.InvalidURL) as exc:
        raise ValidationError("Invalid URL") from exc
    if parts.scheme not in ("http", "https") or not hostname:
        raise ValidationError("Invalid URL")
    if _FORBIDDEN_HOST_CHARS.search(hostname):
        raise ValidationError("Invalid URL")


@dataclass(frozen=True)
class PageMeta:
    title: str
    url: str
    domain: str
    crawled_at: str
    content_hash: str
    excerpt: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "url": self.url,
            "domain": self.domain,
            "crawled_at": self.crawled_at,
            "content_hash": self.content_hash,
            "excerpt": self.excerpt,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PageMeta":
        return cls(
            title=data["title"],
            url=data["url"],
            domain=data["domain"],
            crawled_at=data["crawled_at"],
            content_hash=data["content_hash"],
            excerpt=data.get("excerpt", ""),
        )


@dataclass(frozen=True)
class Chunk:
    index: int
    text: str
    approx_word_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "chunk_index": self.index,
            "text": self.text,
            "approx_words": self.approx_word_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Chunk":
        return cls(
            index=int(data["chunk_index"]),
            text=data["text"],
            approx_word_count=int(data["approx_words"]),
        )


@dataclass(frozen=True)
class ScrapeResult:
    id: str
    meta: PageMeta
    markdown: str
    chunks: list[Chunk] = field(default_factory=list)
    fetch_status: int = 200

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "meta": self.meta.to_dict(),
            "md": self.markdown,
            "chunks": [c.to_dict() for c in self.chunks],
            "fetched": {"status": self.fetch_status},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScrapeResult":
        return cls(
            id=data["id"],
            meta=PageMeta.from_dict(data["meta"]),
            markdown=data["md"],
            chunks=[Chunk.from_dict(c) for c in data.get("chunks", [])],
            fetch_status=int(data.get("fetched", {}).get("status", 200)),
        )


@dataclass(frozen=True)
class CacheEntry:
    """A persisted result plus its composed Markdown."""

    result: ScrapeResult
    markdown: str

    def to_dict(self) -> dict[str, Any]:
        return {"json": self.result.to_dict(), "md": self.markdown}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntry":
        return cls(result=ScrapeResult.from_dict(data["json"]), markdown=data["md"])
