"""Deterministic content fingerprints."""

from __future__ import annotations

import hashlib

from site2md.scraper.models import RenderMode


def sha256_hex(text: str) -> str:
    """Return the hex SHA-256 digest of *text* encoded as UTF-8."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def cache_key(url: str, render_mode: RenderMode, target_words: int) -> str:
    """Fingerprint of the parameters that define a cached scrape."""
    return sha256_hex(f"{url}|{render_mode.flag}|{target_words}")


def result_id(url: str, content_hash: str) -> str:
    """Stable identity of a page's content, independent of crawl time."""
    return sha256_hex(f"{url}|{content_hash}")
