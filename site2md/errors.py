"""Exception hierarchy for the scrape pipeline.

Every pipeline failure that should reach a caller is a :class:`Site2mdError`
carrying the HTTP status it maps to.  The API layer turns these into
``{"error": message}`` JSON bodies; the CLI prints the message and exits 1.
"""

from __future__ import annotations


class Site2mdError(Exception):
    """Base class for errors surfaced to API and CLI callers."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(Site2mdError):
    """The request URL is missing or malformed."""

    status_code = 400
    default_message = "Invalid URL"


class RobotsBlocked(Site2mdError):
    status_code = 403
    default_message = "Blocked by robots.txt"


class FetchError(Site2mdError):
    """Timeout, network failure, or navigation failure while fetching a page."""

    status_code = 500
    default_message = "Failed to fetch page"


class ExtractionError(Site2mdError):
    """Neither the readability pass nor the body fallback produced content."""

    status_code = 422
    default_message = "Could not extract content"


class InternalError(Site2mdError):
    status_code = 500


class CacheWriteFailure(Site2mdError):
    """A cache entry could not be persisted.

    Never escapes :class:`~site2md.store.cache.ResultCache`; ``set`` reports
    it as a ``False`` return so the pipeline can log and carry on.
    """

    default_message = "Cache write failed"
