"""Filesystem result cache: one ``<key>.json`` file per cache key.

The cache never expires or evicts entries; cleanup is left to whoever
operates the cache directory.  Reads and writes run in a worker thread so
they don't block the event loop, and failures degrade instead of raising:
a failed read is a miss, a failed write only loses persistence.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from site2md.config import settings
from site2md.errors import CacheWriteFailure
from site2md.store.models import CacheEntry

logger = logging.getLogger(__name__)


class ResultCache:
    def __init__(self, cache_dir: Path | None = None) -> None:
        self.cache_dir = Path(cache_dir) if cache_dir is not None else settings.cache_dir

    def path_for(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    # ------------------------------------------------------------------
    # Blocking helpers (run via asyncio.to_thread)
    # ------------------------------------------------------------------

    def _read(self, key: str) -> CacheEntry | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return CacheEntry.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", path.name, exc)
            return None

    def _write(self, key: str, entry: CacheEntry) -> None:
        """Write *entry* to a temp file in the cache directory, then rename it
        over the target so readers only ever see a complete file.
        """
        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            payload = json.dumps(entry.to_dict(), indent=2, ensure_ascii=False)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.cache_dir,
                prefix=f".{key}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CacheWriteFailure(f"Could not write {path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get(self, key: str) -> CacheEntry | None:
        """Return the entry stored under *key*, or ``None`` on miss or error."""
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, entry: CacheEntry) -> bool:
        """Persist *entry* under *key*, overwriting any previous entry.

        Returns ``False`` instead of raising when the write fails.
        """
        try:
            await asyncio.to_thread(self._write, key, entry)
        except CacheWriteFailure as exc:
            logger.warning("%s", exc)
            return False
        return True
