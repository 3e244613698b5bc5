"""Centralised settings for the site2md service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() not in ("0", "false", "no", "off")


def _env_list(name: str, default: str) -> list[str]:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = field(
        default_factory=lambda: os.environ.get("SITE2MD_HOST", "0.0.0.0")
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("PORT", "5600"))
    )
    cors_origins: list[str] = field(
        default_factory=lambda: _env_list("CORS_ORIGINS", "http://localhost:5173")
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    # ------------------------------------------------------------------
    # Result cache
    # ------------------------------------------------------------------
    cache_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SITE2MD_CACHE_DIR", Path.cwd() / "cache")
        )
    )

    # ------------------------------------------------------------------
    # Fetching / rendering
    # ------------------------------------------------------------------
    page_timeout: float = field(
        default_factory=lambda: float(os.environ.get("PAGE_TIMEOUT", "20.0"))
    )
    robots_timeout: float = field(
        default_factory=lambda: float(os.environ.get("ROBOTS_TIMEOUT", "5.0"))
    )
    render_settle_delay: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_SETTLE_DELAY", "0.3"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "SITE2MD_USER_AGENT", "site2md-api (+https://localhost)"
        )
    )
    robots_agent: str = field(
        default_factory=lambda: os.environ.get("SITE2MD_ROBOTS_AGENT", "site2md-api")
    )
    viewport_width: int = field(
        default_factory=lambda: int(os.environ.get("VIEWPORT_WIDTH", "1200"))
    )
    viewport_height: int = field(
        default_factory=lambda: int(os.environ.get("VIEWPORT_HEIGHT", "800"))
    )
    headless: bool = field(
        default_factory=lambda: _env_bool("BROWSER_HEADLESS", "true")
    )

    # ------------------------------------------------------------------
    # Chunking
    # ------------------------------------------------------------------
    default_target_words: int = field(
        default_factory=lambda: int(os.environ.get("DEFAULT_TARGET_WORDS", "1000"))
    )
    max_overlap_words: int = field(
        default_factory=lambda: int(os.environ.get("MAX_OVERLAP_WORDS", "250"))
    )
    overlap_ratio: float = field(
        default_factory=lambda: float(os.environ.get("OVERLAP_RATIO", "0.2"))
    )

    @property
    def viewport(self) -> dict[str, int]:
        """Viewport mapping in the shape Playwright expects."""
        return {"width": self.viewport_width, "height": self.viewport_height}

    def overlap_for(self, target_words: int) -> int:
        """Return the overlap word count used for a given chunk target."""
        return min(self.max_overlap_words, int(target_words * self.overlap_ratio))

    def ensure_cache_dir(self) -> None:
        """Create the cache directory if it does not exist."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton — import this everywhere:
#   from site2md.config import settings
settings = Settings()
