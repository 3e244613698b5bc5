"""Process-wide headless browser handle.

One Chromium instance is shared by every rendered fetch.  The handle is
created at application start (see :mod:`site2md.api.app`) and passed to the
:class:`~site2md.scraper.fetcher.PageFetcher`; the browser itself is launched
lazily on the first rendered request and closed by :meth:`stop`.

Playwright is imported lazily so the static path and the test suite don't
need a browser installed.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from site2md.config import settings

logger = logging.getLogger(__name__)


class RenderingEngineHandle:
    def __init__(
        self,
        headless: bool | None = None,
        user_agent: str | None = None,
        viewport: dict[str, int] | None = None,
    ) -> None:
        self.headless = settings.headless if headless is None else headless
        self.user_agent = user_agent or settings.user_agent
        self.viewport = viewport or settings.viewport
        self._playwright: Any = None
        self._browser: Any = None
        self._lock = asyncio.Lock()

    @property
    def started(self) -> bool:
        return self._browser is not None

    async def start(self) -> None:
        """Launch the browser if it is not running yet.  Idempotent."""
        async with self._lock:
            if self._browser is not None:
                return
            from playwright.async_api import async_playwright  # noqa: PLC0415

            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            logger.info("Browser launched (headless=%s)", self.headless)

    async def browser(self) -> Any:
        if self._browser is None:
            await self.start()
        return self._browser

    @asynccontextmanager
    async def new_page(self) -> AsyncIterator[Any]:
        """Yield a page in a fresh, isolated browsing context.

        Page and context are closed on every exit path, including
        navigation errors raised inside the ``async with`` block.
        """
        browser = await self.browser()
        context = await browser.new_context(
            user_agent=self.user_agent,
            viewport=self.viewport,
        )
        try:
            page = await context.new_page()
            try:
                yield page
            finally:
                await page.close()
        finally:
            await context.close()

    async def stop(self) -> None:
        """Close the browser and the Playwright driver."""
        async with self._lock:
            if self._browser is not None:
                try:
                    await self._browser.close()
                finally:
                    self._browser = None
            if self._playwright is not None:
                try:
                    await self._playwright.stop()
                finally:
                    self._playwright = None
                logger.info("Browser stopped")
