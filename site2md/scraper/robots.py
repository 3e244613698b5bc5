"""robots.txt politeness check.

Politeness is best-effort: any failure to retrieve or parse the robots file
is treated as permission to crawl.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit
from urllib.robotparser import RobotFileParser

import httpx

from site2md.config import settings

logger = logging.getLogger(__name__)


def robots_url_for(url: str) -> str:
    """Return ``{scheme}://{host}/robots.txt`` for *url*."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}/robots.txt"


def parse_robots(robots_url: str, text: str) -> RobotFileParser:
    """Build a parser for the robots document *text* served at *robots_url*."""
    parser = RobotFileParser(robots_url)
    parser.parse(text.splitlines())
    return parser


class RobotsGate:
    """Decides whether a URL may be crawled according to its host's robots.txt.

    Allowance is granted when either the named crawler agent or the
    wildcard agent may fetch the URL.
    """

    def __init__(
        self,
        agent: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.agent = agent or settings.robots_agent
        self.timeout = timeout if timeout is not None else settings.robots_timeout
        self.user_agent = user_agent or settings.user_agent

    async def _fetch_parser(self, url: str) -> RobotFileParser | None:
        robots_url = robots_url_for(url)
        async with httpx.AsyncClient(
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
            follow_redirects=True,
        ) as client:
            response = await client.get(robots_url)
        if response.status_code >= 400:
            logger.debug("No robots.txt at %s (status %s)", robots_url, response.status_code)
            return None
        return parse_robots(robots_url, response.text)

    async def check_allowed(self, url: str) -> bool:
        """Return ``True`` if *url* may be crawled.

        A single attempt is made; a timeout, network error, or unparsable
        document defaults to allowed.
        """
        try:
            parser = await self._fetch_parser(url)
        except Exception as exc:  # noqa: BLE001
            logger.warning("robots check failed for %s: %s", url, exc)
            return True
        if parser is None:
            return True
        return parser.can_fetch(self.agent, url) or parser.can_fetch("*", url)
