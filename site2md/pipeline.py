"""Scrape pipeline — URL variant.

``ScrapePipeline.run`` sequences the stages for one request:

    robots check → cache lookup → fetch → extract (with body fallback)
    → Markdown → hash → frontmatter → chunk → cache store

The cache is written only after every stage succeeded, so a failed request
never leaves a partial entry behind.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable
from urllib.parse import urlsplit

from site2md.config import Settings, settings as default_settings
from site2md.errors import ExtractionError, RobotsBlocked
from site2md.hashing import cache_key, result_id, sha256_hex
from site2md.markdown.chunker import chunk_markdown
from site2md.markdown.converter import html_to_markdown
from site2md.markdown.frontmatter import compose
from site2md.scraper.extractor import ArticleExtractor
from site2md.scraper.fetcher import PageFetcher
from site2md.scraper.models import ArticleContent, FetchedPage
from site2md.scraper.robots import RobotsGate
from site2md.store.cache import ResultCache
from site2md.store.models import CacheEntry, PageMeta, ScrapeRequest, ScrapeResult

logger = logging.getLogger(__name__)


def iso_now() -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class ScrapePipeline:
    """Runs scrape requests against injectable collaborators.

    Args:
        fetcher: Page fetcher (owns the shared browser handle).
        robots: Politeness gate.  ``None`` skips the robots check.
        extractor: Readability extractor with body fallback.
        cache: Result cache.  ``None`` disables caching.
        config: Settings used for overlap sizing.
        clock: Returns the crawl timestamp; overridable in tests.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        robots: RobotsGate | None = None,
        extractor: ArticleExtractor | None = None,
        cache: ResultCache | None = None,
        config: Settings | None = None,
        clock: Callable[[], str] = iso_now,
    ) -> None:
        self.fetcher = fetcher
        self.robots = robots
        self.extractor = extractor or ArticleExtractor()
        self.cache = cache
        self.config = config or default_settings
        self.clock = clock

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def extract(self, page: FetchedPage) -> ArticleContent:
        """Extract the article, falling back to the whole body.

        Raises:
            ExtractionError: If neither pass yields any markup.
        """
        article = self.extractor.extract(page.html, page.final_url)
        if article is None or article.is_empty:
            logger.info("Readability found nothing on %s; using full body", page.final_url)
            article = self.extractor.fallback(page.html)
            if article.is_empty:
                raise ExtractionError()
        return article

    def build_result(
        self, page: FetchedPage, article: ArticleContent, target_words: int
    ) -> ScrapeResult:
        """Convert, fingerprint, compose and chunk an extracted article."""
        body = html_to_markdown(article.content_html)
        content_hash = sha256_hex(body)
        meta = PageMeta(
            title=article.title or "",
            url=page.final_url,
            domain=urlsplit(page.final_url).hostname or "",
            crawled_at=self.clock(),
            content_hash=content_hash,
            excerpt=article.excerpt or "",
        )
        markdown = compose(body, meta)
        chunks = chunk_markdown(
            markdown,
            target_words=target_words,
            overlap_words=self.config.overlap_for(target_words),
        )
        return ScrapeResult(
            id=result_id(meta.url, content_hash),
            meta=meta,
            markdown=markdown,
            chunks=chunks,
            fetch_status=page.status_code or 200,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self, request: ScrapeRequest) -> ScrapeResult:
        """Scrape *request.url* and return the chunked result.

        Raises:
            RobotsBlocked: robots.txt disallows the URL.
            FetchError: The page could not be fetched or rendered.
            ExtractionError: No content could be extracted.
        """
        logger.info("Processing %s", request.url)

        if self.robots is not None and not await self.robots.check_allowed(request.url):
            raise RobotsBlocked()

        key = cache_key(request.url, request.render_mode, request.target_words)
        if self.cache is not None:
            cached = await self.cache.get(key)
            if cached is not None:
                logger.info("Cache hit for %s", request.url)
                return cached.result

        page = await self.fetcher.fetch(
            request.url,
            render_mode=request.render_mode,
            timeout=self.config.page_timeout,
        )
        if not page.final_url:
            page = FetchedPage(html=page.html, final_url=request.url, status_code=page.status_code)

        article = self.extract(page)
        result = self.build_result(page, article, request.target_words)

        if self.cache is not None:
            stored = await self.cache.set(key, CacheEntry(result=result, markdown=result.markdown))
            if not stored:
                logger.warning("Result for %s was not cached", request.url)

        logger.info("Scraped %s into %d chunk(s)", result.meta.url, len(result.chunks))
        return result
