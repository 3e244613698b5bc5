"""Tests for request parsing and result records."""

from __future__ import annotations

import pytest

from site2md.errors import ValidationError
from site2md.scraper.models import RenderMode
from site2md.store.models import (
    MISSING_URL_MESSAGE,
    CacheEntry,
    Chunk,
    PageMeta,
    ScrapeRequest,
    ScrapeResult,
)


class TestScrapeRequestFromQuery:
    def test_missing_url(self) -> None:
        with pytest.raises(ValidationError) as excinfo:
            ScrapeRequest.from_query(None)
        assert excinfo.value.message == MISSING_URL_MESSAGE
        assert excinfo.value.status_code == 400

    @pytest.mark.parametrize(
        "url",
        [
            "not-a-url",
            "example.com",
            "ftp://example.com/x",
            "http://",
            "https://[::1",
            "https://example.com:99999/",
            "http://exa mple.com/",
            "http://exa<mple.com/",
        ],
    )
    def test_invalid_urls(self, url: str) -> None:
        with pytest.raises(ValidationError, match="Invalid URL"):
            ScrapeRequest.from_query(url)

    def test_defaults(self) -> None:
        req = ScrapeRequest.from_query("https://example.com/")
        assert req.render_mode is RenderMode.RENDERED
        assert req.target_words == 1000
        assert req.raw_output is False

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("250", 250), ("abc", 1000), ("", 1000), ("0", 1000), ("-5", 1000), (None, 1000)],
    )
    def test_target_words(self, value, expected: int) -> None:
        assert ScrapeRequest.from_query("https://a.com", target_words=value).target_words == expected

    def test_render_only_false_disables(self) -> None:
        assert ScrapeRequest.from_query("https://a.com", render="no").render_mode is RenderMode.RENDERED
        assert ScrapeRequest.from_query("https://a.com", render="False").render_mode is RenderMode.STATIC

    def test_raw_only_true_enables(self) -> None:
        assert ScrapeRequest.from_query("https://a.com", raw="1").raw_output is False
        assert ScrapeRequest.from_query("https://a.com", raw="TRUE").raw_output is True

    def test_request_is_immutable(self) -> None:
        req = ScrapeRequest.from_query("https://a.com")
        with pytest.raises(AttributeError):
            req.url = "https://b.com"  # type: ignore[misc]

    def test_direct_construction_validates(self) -> None:
        with pytest.raises(ValidationError):
            ScrapeRequest(url="nope")
        with pytest.raises(ValueError):
            ScrapeRequest(url="https://a.com", target_words=0)


class TestResultRecords:
    def test_round_trip_through_dict(self) -> None:
        meta = PageMeta("T", "https://a.com/", "a.com", "2024-01-01T00:00:00.000Z", "h", "e")
        result = ScrapeResult(
            id="i",
            meta=meta,
            markdown="md",
            chunks=[Chunk(0, "a", 1), Chunk(1, "b", 1)],
            fetch_status=201,
        )
        entry = CacheEntry(result=result, markdown="md")
        assert CacheEntry.from_dict(entry.to_dict()) == entry

    def test_render_mode_flags(self) -> None:
        assert RenderMode.RENDERED.flag == "r"
        assert RenderMode.STATIC.flag == "n"


class TestValidUrls:
    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com",
            "http://example.com:8080/path?q=1#frag",
            "http://[::1]:5600/",
            "https://sub.example.co.uk/a%20b",
        ],
    )
    def test_accepted(self, url: str) -> None:
        assert ScrapeRequest.from_query(url).url == url
