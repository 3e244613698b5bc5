"""Result records and the content-addressed result cache."""

from site2md.store.cache import ResultCache
from site2md.store.models import CacheEntry, Chunk, PageMeta, ScrapeRequest, ScrapeResult

__all__ = ["CacheEntry", "Chunk", "PageMeta", "ResultCache", "ScrapeRequest", "ScrapeResult"]
