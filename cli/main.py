"""site2md CLI — entry-point for one-off scrapes and the HTTP server.

Usage:
    site2md --help

Commands:
    scrape   → fetch a URL and print its Markdown / chunk JSON
    chunk    → chunk a local Markdown file
    serve    → run the HTTP API with uvicorn
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer

from site2md.config import settings
from site2md.errors import Site2mdError
from site2md.markdown.chunker import chunk_markdown
from site2md.pipeline import ScrapePipeline
from site2md.scraper.engine import RenderingEngineHandle
from site2md.scraper.fetcher import PageFetcher
from site2md.scraper.models import RenderMode
from site2md.scraper.robots import RobotsGate
from site2md.store.cache import ResultCache
from site2md.store.models import ScrapeRequest

app = typer.Typer(
    name="site2md",
    help="Web page → Markdown → retrieval chunks.",
    no_args_is_help=True,
)


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _run_scrape(request: ScrapeRequest, use_cache: bool):
    engine = RenderingEngineHandle()
    pipeline = ScrapePipeline(
        fetcher=PageFetcher(engine=engine),
        robots=RobotsGate(),
        cache=ResultCache(settings.cache_dir) if use_cache else None,
        config=settings,
    )
    try:
        return await pipeline.run(request)
    finally:
        await engine.stop()


@app.command("scrape")
def scrape(
    url: str = typer.Argument(..., help="Page URL to scrape."),
    render: bool = typer.Option(True, "--render/--no-render", help="Render with a headless browser."),
    target_words: int = typer.Option(
        settings.default_target_words, "--target-words", min=1, help="Target words per chunk."
    ),
    raw: bool = typer.Option(False, "--raw", help="Print the Markdown instead of JSON."),
    use_cache: bool = typer.Option(True, "--cache/--no-cache", help="Read and write the result cache."),
) -> None:
    """Scrape URL and print the result."""
    _configure_logging()
    try:
        request = ScrapeRequest(
            url=url,
            render_mode=RenderMode.RENDERED if render else RenderMode.STATIC,
            target_words=target_words,
            raw_output=raw,
        )
        result = asyncio.run(_run_scrape(request, use_cache))
    except Site2mdError as exc:
        typer.echo(f"[scrape] Error: {exc.message}", err=True)
        raise typer.Exit(1)

    if raw:
        typer.echo(result.markdown)
    else:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


@app.command("chunk")
def chunk(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markdown file."),
    target_words: int = typer.Option(
        settings.default_target_words, "--target-words", min=1, help="Target words per chunk."
    ),
) -> None:
    """Chunk a local Markdown file and print the chunks as JSON."""
    text = path.read_text(encoding="utf-8")
    chunks = chunk_markdown(
        text,
        target_words=target_words,
        overlap_words=settings.overlap_for(target_words),
    )
    typer.echo(json.dumps([c.to_dict() for c in chunks], indent=2, ensure_ascii=False))


@app.command("serve")
def serve(
    host: str = typer.Option(settings.host, help="Bind address."),
    port: int = typer.Option(settings.port, help="Bind port."),
) -> None:
    """Run the HTTP API."""
    import uvicorn  # noqa: PLC0415

    _configure_logging()
    typer.echo(f"[serve] site2md API listening on http://{host}:{port}")
    uvicorn.run("site2md.api:app", host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    app()
