"""Scraper package — robots check, page fetch & content extraction."""

from site2md.scraper.engine import RenderingEngineHandle
from site2md.scraper.extractor import ArticleExtractor, extract_article, fallback_article
from site2md.scraper.fetcher import PageFetcher
from site2md.scraper.models import ArticleContent, FetchedPage, RenderMode
from site2md.scraper.robots import RobotsGate

__all__ = [
    "ArticleContent",
    "ArticleExtractor",
    "FetchedPage",
    "PageFetcher",
    "RenderMode",
    "RenderingEngineHandle",
    "RobotsGate",
    "extract_article",
    "fallback_article",
]
