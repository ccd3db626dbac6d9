# filler_bot/services/cache.py

from __future__ import annotations

import asyncio
import json
import os
import re
import tempfile

from ..config import logger
from .models import CatalogEntry, ClassificationRecord
from .scrapers.base_scraper import FillerSource
from .title_matcher import normalize_title

CACHE_KEY_PREFIX = "filler_"
_WHITESPACE_PATTERN = re.compile(r"\s+")


def cache_key(title: str) -> str | None:
    """
    Derives the storage key for a user-facing title, e.g.
    ``"Naruto: Shippuden"`` -> ``"filler_naruto_shippuden"``.

    Returns None for titles with no letters or digits.
    """
    normalized = normalize_title(title)
    if not normalized:
        return None
    return CACHE_KEY_PREFIX + _WHITESPACE_PATTERN.sub("_", normalized)


class CatalogCache:
    """
    Process-wide copy of the show catalog.

    The first successful, non-empty download is kept for the life of the
    process; it is only dropped by ``invalidate``.
    """

    def __init__(self) -> None:
        self._entries: list[CatalogEntry] | None = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._entries is not None

    async def get_entries(self, source: FillerSource) -> list[CatalogEntry]:
        """Returns the cached catalog, downloading it on first use.

        Raises ``CatalogUnavailable`` if the download fails.
        """
        if self._entries is not None:
            logger.debug("[CATALOG] Using cached shows list.")
            return self._entries

        async with self._lock:
            # Another task may have finished the download while we waited.
            if self._entries is not None:
                return self._entries
            entries = await source.fetch_catalog()
            if entries:
                self._entries = entries
            else:
                logger.warning(
                    "[CATALOG] Shows list came back empty; not caching it."
                )
            return entries

    def invalidate(self) -> None:
        self._entries = None


class ClassificationCache:
    """
    Resolved filler lists, kept in memory and mirrored to a JSON file.

    Reads never touch the disk once ``load`` has run. Every write replaces a
    whole record and rewrites the file through a temporary file, so a crash
    or a concurrent reader never sees half a record.
    """

    def __init__(self, file_path: str | None = None) -> None:
        self.file_path = file_path
        self._records: dict[str, ClassificationRecord] = {}
        self._save_lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    async def load(self) -> None:
        """Reads the cache file, starting empty if it is missing or unreadable."""
        if not self.file_path:
            return
        self._records = await asyncio.to_thread(_read_records, self.file_path)

    def get(self, key: str) -> ClassificationRecord | None:
        return self._records.get(key)

    async def set(self, key: str, record: ClassificationRecord) -> None:
        self._records = {**self._records, key: record}
        await self._save()
        logger.info(
            f"[CACHE] Stored {len(record.filler_episodes)} filler episodes for "
            f"'{record.query_title}' under '{key}'."
        )

    async def clear(self) -> int:
        """Removes every record. Returns how many were removed."""
        removed = len(self._records)
        self._records = {}
        await self._save()
        logger.info(f"[CACHE] Cleared {removed} stored filler lists.")
        return removed

    async def _save(self) -> None:
        if not self.file_path:
            return
        # Writes land in call order, each one a snapshot of the latest records.
        async with self._save_lock:
            snapshot = {key: record.to_dict() for key, record in self._records.items()}
            try:
                await asyncio.to_thread(_write_records, self.file_path, snapshot)
            except OSError as e:
                # The in-memory copy stays authoritative until the next write.
                logger.error(
                    f"[CACHE] Could not save cache file '{self.file_path}': {e}"
                )


def _read_records(file_path: str) -> dict[str, ClassificationRecord]:
    if not os.path.exists(file_path):
        logger.info(
            f"[CACHE] Cache file '{file_path}' not found. Starting with an empty cache."
        )
        return {}

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.error(
            f"[CACHE] Could not read or parse cache file '{file_path}': {e}. Starting fresh."
        )
        return {}

    if not isinstance(data, dict):
        logger.error(f"[CACHE] Cache file '{file_path}' is not a JSON object. Starting fresh.")
        return {}

    records: dict[str, ClassificationRecord] = {}
    for key, raw in data.items():
        try:
            records[key] = ClassificationRecord.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"[CACHE] Dropping unreadable record '{key}': {e}")

    logger.info(f"[CACHE] Loaded {len(records)} stored filler lists.")
    return records


def _write_records(file_path: str, snapshot: dict[str, dict]) -> None:
    directory = os.path.dirname(os.path.abspath(file_path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".filler_cache_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, indent=4)
        os.replace(tmp_path, file_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
