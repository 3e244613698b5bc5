"""FastAPI application factory.

Lifespan
--------
On startup the app builds one :class:`~site2md.scraper.engine.RenderingEngineHandle`
(the shared headless browser, launched lazily on the first rendered fetch)
and a :class:`~site2md.pipeline.ScrapePipeline` wired to it, both stored on
``app.state``.  On shutdown it closes the browser cleanly.

Routers
-------
    /        — scrape a URL into Markdown + chunks
    /health  — liveness probe
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from site2md.api.routers import health as health_router
from site2md.api.routers import scrape as scrape_router
from site2md.config import Settings, settings as default_settings
from site2md.pipeline import ScrapePipeline
from site2md.scraper.engine import RenderingEngineHandle
from site2md.scraper.fetcher import PageFetcher
from site2md.scraper.robots import RobotsGate
from site2md.store.cache import ResultCache


def build_pipeline(config: Settings, engine: RenderingEngineHandle) -> ScrapePipeline:
    """Wire the default collaborators around *engine*."""
    config.ensure_cache_dir()
    return ScrapePipeline(
        fetcher=PageFetcher(engine=engine),
        robots=RobotsGate(),
        cache=ResultCache(config.cache_dir),
        config=config,
    )


def create_app(
    config: Settings | None = None,
    pipeline: ScrapePipeline | None = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        config: Settings to use.  Defaults to the module-level ``settings``.
        pipeline: Pre-built pipeline.  When omitted, one is wired around the
            app's browser handle at startup.
    """
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the browser handle on startup and close it on shutdown."""
        engine = RenderingEngineHandle()
        app.state.engine = engine
        app.state.pipeline = (
            pipeline if pipeline is not None else build_pipeline(config, engine)
        )
        try:
            yield
        finally:
            await engine.stop()

    app = FastAPI(
        title="site2md API",
        description=(
            "Fetches a web page, extracts its main content, converts it to "
            "Markdown with frontmatter, and splits it into overlapping "
            "word-bounded chunks for retrieval pipelines."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(health_router.router, prefix="/health", tags=["health"])
    app.include_router(scrape_router.router, tags=["scrape"])

    return app
