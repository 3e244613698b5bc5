"""Page fetcher: plain HTTP GET or a rendered headless-browser session."""

from __future__ import annotations

import logging

import httpx

from site2md.config import settings
from site2md.errors import FetchError
from site2md.scraper.engine import RenderingEngineHandle
from site2md.scraper.models import FetchedPage, RenderMode

logger = logging.getLogger(__name__)


class PageFetcher:
    """Retrieves a page and normalises it to a :class:`FetchedPage`.

    Args:
        engine: Shared browser handle used for ``RenderMode.RENDERED``.
            Required only when rendered fetches are performed.
        user_agent: ``User-Agent`` header for static fetches.
        settle_delay: Seconds to wait after ``domcontentloaded`` so deferred
            content can attach to the DOM.
    """

    def __init__(
        self,
        engine: RenderingEngineHandle | None = None,
        user_agent: str | None = None,
        settle_delay: float | None = None,
    ) -> None:
        self.engine = engine
        self.user_agent = user_agent or settings.user_agent
        self.settle_delay = (
            settings.render_settle_delay if settle_delay is None else settle_delay
        )

    async def fetch(
        self,
        url: str,
        render_mode: RenderMode = RenderMode.RENDERED,
        timeout: float | None = None,
    ) -> FetchedPage:
        """Fetch *url*.

        Raises:
            FetchError: On timeout, network failure, or navigation failure.
        """
        timeout = settings.page_timeout if timeout is None else timeout
        if render_mode is RenderMode.STATIC:
            return await self._fetch_static(url, timeout)
        return await self._fetch_rendered(url, timeout)

    async def _fetch_static(self, url: str, timeout: float) -> FetchedPage:
        try:
            async with httpx.AsyncClient(
                headers={"User-Agent": self.user_agent},
                timeout=timeout,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}") from exc

        return FetchedPage(
            html=response.text,
            final_url=str(response.url),
            status_code=response.status_code,
        )

    async def _fetch_rendered(self, url: str, timeout: float) -> FetchedPage:
        if self.engine is None:
            raise FetchError("Rendered fetch requested but no browser engine is configured")

        from playwright.async_api import Error as PlaywrightError  # noqa: PLC0415

        try:
            async with self.engine.new_page() as page:
                response = await page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=int(timeout * 1000),
                )
                await page.wait_for_timeout(self.settle_delay * 1000)
                html = await page.content()
                final_url = page.url
        except PlaywrightError as exc:
            # TimeoutError is a subclass of playwright's Error.
            logger.warning("Navigation to %s failed: %s", url, exc)
            raise FetchError(f"Failed to render {url}: {exc}") from exc

        return FetchedPage(
            html=html,
            final_url=final_url or url,
            status_code=response.status if response is not None else 200,
        )
