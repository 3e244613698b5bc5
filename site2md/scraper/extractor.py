"""Main-content extraction: turns a :class:`FetchedPage` body into an
:class:`ArticleContent`.

``extract_article`` runs the readability heuristic and returns ``None`` when
it finds nothing usable; ``fallback_article`` is the whole-body substitute
the pipeline applies in that case.
"""

from __future__ import annotations

import logging

import trafilatura
from bs4 import BeautifulSoup
from readability import Document

from site2md.scraper.models import ArticleContent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _has_text(html: str) -> bool:
    """Return ``True`` if *html* contains any visible text."""
    if not html or not html.strip():
        return False
    return bool(BeautifulSoup(html, "html.parser").get_text(strip=True))


def _extract_excerpt(html: str, base_url: str) -> str:
    """Return the page's metadata description, or empty string."""
    try:
        metadata = trafilatura.extract_metadata(html, default_url=base_url)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Metadata extraction failed for %s: %s", base_url, exc)
        return ""
    if metadata is None or not metadata.description:
        return ""
    return metadata.description.strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_article(html: str, base_url: str) -> ArticleContent | None:
    """Extract the main readable region of *html*.

    Uses ``readability-lxml`` to locate the article body.  Returns ``None``
    when the document cannot be parsed or the extracted region has no text.
    """
    if not html or not html.strip():
        return None
    try:
        doc = Document(html, url=base_url)
        content_html = doc.summary(html_partial=True)
        title = doc.short_title() or ""
    except Exception as exc:  # noqa: BLE001
        logger.debug("Readability failed for %s: %s", base_url, exc)
        return None

    if not _has_text(content_html):
        return None

    return ArticleContent(
        title=title.strip(),
        content_html=content_html,
        excerpt=_extract_excerpt(html, base_url),
    )


def fallback_article(html: str) -> ArticleContent:
    """Build an :class:`ArticleContent` from the full document body.

    ``title`` is the document ``<title>`` and ``content_html`` the body's
    inner markup; either may be empty.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    title = soup.title.get_text(strip=True) if soup.title else ""
    content_html = soup.body.decode_contents() if soup.body else ""
    return ArticleContent(title=title, content_html=content_html.strip(), excerpt="")


class ArticleExtractor:
    """Thin object wrapper so the pipeline can take an injectable extractor."""

    def extract(self, html: str, base_url: str) -> ArticleContent | None:
        return extract_article(html, base_url)

    def fallback(self, html: str) -> ArticleContent:
        return fallback_article(html)
