"""Scrape endpoint.

Routes
------
GET /?url=<page_url>&render=<true|false>&target_words=<num>&raw=<true|false>

Returns the :class:`~site2md.store.models.ScrapeResult` as JSON, or the
composed Markdown as ``text/markdown`` when ``raw=true``.  Failures are
reported as ``{"error": "<message>"}`` with the status of the error kind.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from site2md.errors import InternalError, Site2mdError
from site2md.store.models import ScrapeRequest

logger = logging.getLogger(__name__)

router = APIRouter()

MARKDOWN_MEDIA_TYPE = "text/markdown; charset=utf-8"


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class MetaOut(BaseModel):
    title: str
    url: str
    domain: str
    crawled_at: str
    content_hash: str
    excerpt: str


class ChunkOut(BaseModel):
    chunk_index: int
    text: str
    approx_words: int


class FetchedOut(BaseModel):
    status: int


class ScrapeResponse(BaseModel):
    id: str
    meta: MetaOut
    md: str
    chunks: list[ChunkOut]
    fetched: FetchedOut


class ErrorResponse(BaseModel):
    error: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.get(
    "/",
    response_model=ScrapeResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def scrape(
    request: Request,
    url: Optional[str] = None,
    render: str = "true",
    target_words: str = "1000",
    raw: str = "false",
) -> Any:
    """Scrape *url* into Markdown and retrieval chunks.

    Args:
        url: Absolute http(s) URL of the page.
        render: ``false`` fetches the page with a plain HTTP GET instead of
            the headless browser.
        target_words: Target chunk size in words (non-numeric → default).
        raw: ``true`` returns the composed Markdown instead of JSON.
    """
    config = request.app.state.config
    try:
        scrape_request = ScrapeRequest.from_query(
            url,
            render=render,
            target_words=target_words,
            raw=raw,
            default_target_words=config.default_target_words,
        )
        result = await request.app.state.pipeline.run(scrape_request)
    except Site2mdError as exc:
        if exc.status_code >= 500:
            logger.error("Error processing %s: %s", url, exc.message)
        return _error(exc.status_code, exc.message)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error processing %s", url)
        internal = InternalError(str(exc) or None)
        return _error(internal.status_code, internal.message)

    if scrape_request.raw_output:
        return Response(content=result.markdown, media_type=MARKDOWN_MEDIA_TYPE)
    return result.to_dict()
