"""Tests for the HTTP API.

The app's pipeline is replaced before the ``TestClient`` lifespan starts, so
no browser is launched and no network is touched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from site2md.api.app import create_app
from site2md.config import Settings
from site2md.errors import ExtractionError, FetchError, RobotsBlocked
from site2md.scraper.models import RenderMode
from site2md.store.models import Chunk, PageMeta, ScrapeResult


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _result() -> ScrapeResult:
    meta = PageMeta(
        title="Title",
        url="https://example.com/",
        domain="example.com",
        crawled_at="2024-01-01T00:00:00.000Z",
        content_hash="hash",
        excerpt="",
    )
    markdown = '---\ntitle: "Title"\n---\n\n# Title\n\nPara one.'
    return ScrapeResult(
        id="result-id",
        meta=meta,
        markdown=markdown,
        chunks=[Chunk(index=0, text=markdown, approx_word_count=7)],
        fetch_status=200,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def pipeline() -> MagicMock:
    fake = MagicMock()
    fake.run = AsyncMock(return_value=_result())
    return fake


@pytest.fixture()
def client(pipeline: MagicMock, tmp_path: Path) -> Generator[TestClient, None, None]:
    """TestClient whose app uses the fake *pipeline*."""
    app = create_app(Settings(cache_dir=tmp_path), pipeline=pipeline)
    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestScrapeValidation:
    def test_missing_url_returns_400(self, client: TestClient, pipeline: MagicMock) -> None:
        resp = client.get("/")
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Missing url query parameter")
        pipeline.run.assert_not_called()

    def test_invalid_url_returns_400(self, client: TestClient, pipeline: MagicMock) -> None:
        resp = client.get("/", params={"url": "not-a-url"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid URL"}
        pipeline.run.assert_not_called()

    def test_out_of_range_port_returns_400(self, client: TestClient, pipeline: MagicMock) -> None:
        resp = client.get("/", params={"url": "https://example.com:99999/"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid URL"}
        pipeline.run.assert_not_called()


class TestScrapeParameters:
    def test_defaults(self, client: TestClient, pipeline: MagicMock) -> None:
        client.get("/", params={"url": "https://example.com/"})
        request = pipeline.run.await_args.args[0]
        assert request.url == "https://example.com/"
        assert request.render_mode is RenderMode.RENDERED
        assert request.target_words == 1000
        assert request.raw_output is False

    def test_render_false_selects_static(self, client: TestClient, pipeline: MagicMock) -> None:
        client.get("/", params={"url": "https://example.com/", "render": "FALSE"})
        assert pipeline.run.await_args.args[0].render_mode is RenderMode.STATIC

    def test_non_numeric_target_words_falls_back(
        self, client: TestClient, pipeline: MagicMock
    ) -> None:
        client.get("/", params={"url": "https://example.com/", "target_words": "lots"})
        assert pipeline.run.await_args.args[0].target_words == 1000

    def test_target_words_passed_through(self, client: TestClient, pipeline: MagicMock) -> None:
        client.get("/", params={"url": "https://example.com/", "target_words": "250"})
        assert pipeline.run.await_args.args[0].target_words == 250


class TestScrapeResponses:
    def test_json_shape(self, client: TestClient) -> None:
        resp = client.get("/", params={"url": "https://example.com/"})
        assert resp.status_code == 200
        data = resp.json()
        assert set(data) == {"id", "meta", "md", "chunks", "fetched"}
        assert data["id"] == "result-id"
        assert data["meta"]["domain"] == "example.com"
        assert data["chunks"] == [
            {"chunk_index": 0, "text": data["md"], "approx_words": 7}
        ]
        assert data["fetched"] == {"status": 200}

    def test_raw_returns_markdown(self, client: TestClient) -> None:
        resp = client.get("/", params={"url": "https://example.com/", "raw": "true"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/markdown")
        assert resp.text == _result().markdown

    def test_robots_blocked_returns_403(self, client: TestClient, pipeline: MagicMock) -> None:
        pipeline.run.side_effect = RobotsBlocked()
        resp = client.get("/", params={"url": "https://example.com/"})
        assert resp.status_code == 403
        assert resp.json() == {"error": "Blocked by robots.txt"}

    def test_extraction_error_returns_422(self, client: TestClient, pipeline: MagicMock) -> None:
        pipeline.run.side_effect = ExtractionError()
        resp = client.get("/", params={"url": "https://example.com/"})
        assert resp.status_code == 422
        assert resp.json() == {"error": "Could not extract content"}

    def test_fetch_error_returns_500(self, client: TestClient, pipeline: MagicMock) -> None:
        pipeline.run.side_effect = FetchError("Timed out fetching https://example.com/")
        resp = client.get("/", params={"url": "https://example.com/"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Timed out fetching https://example.com/"}

    def test_unexpected_error_returns_500(self, client: TestClient, pipeline: MagicMock) -> None:
        pipeline.run.side_effect = RuntimeError("boom")
        resp = client.get("/", params={"url": "https://example.com/"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "boom"}

    def test_unexpected_error_without_message(
        self, client: TestClient, pipeline: MagicMock
    ) -> None:
        pipeline.run.side_effect = KeyError()
        resp = client.get("/", params={"url": "https://example.com/"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal error"}


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["ok"] is True
        assert data["ts"].endswith("Z")


class TestLifespan:
    def test_default_pipeline_is_built(self, tmp_path: Path) -> None:
        app = create_app(Settings(cache_dir=tmp_path / "cache"))
        with TestClient(app):
            assert app.state.pipeline is not None
            assert app.state.pipeline.fetcher.engine is app.state.engine
            assert (tmp_path / "cache").is_dir()

    def test_supplied_pipeline_is_used(self, pipeline: MagicMock, tmp_path: Path) -> None:
        app = create_app(Settings(cache_dir=tmp_path), pipeline=pipeline)
        with TestClient(app) as c:
            assert app.state.pipeline is pipeline
            c.get("/", params={"url": "https://example.com/"})
        pipeline.run.assert_awaited_once()
