# filler_bot/services/resolution_service.py

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from ..config import logger
from .cache import CatalogCache, ClassificationCache, cache_key
from .episode_ranges import parse_episode_ranges
from .models import (
    CatalogUnavailable,
    ClassificationRecord,
    ClassificationUnavailable,
    Failed,
    FailureReason,
    FillerVerdict,
    LabeledSection,
    MatchResult,
    ResolutionOutcome,
    Unresolved,
)
from .scrapers.animefillerlist import AnimeFillerListSource
from .scrapers.base_scraper import FillerSource
from .title_matcher import MATCH_THRESHOLD, find_best_match, suggest_titles

FILLER_LABEL = "filler"
MIXED_LABEL = "mixed"


def is_filler_section(section: LabeledSection) -> bool:
    """
    True for a pure filler section.

    ``filler`` must be one of the labels as a whole word, and no label may
    mention ``mixed`` (``mixed_filler`` sections are partly canon).
    """
    labels = [label.lower() for label in section.labels]
    if FILLER_LABEL not in labels:
        return False
    return not any(MIXED_LABEL in label for label in labels)


def select_filler_text(sections: Sequence[LabeledSection]) -> str:
    """Returns the episode text of the first pure filler section, or ``""``."""
    for section in sections:
        if is_filler_section(section):
            return section.episodes_text
        logger.debug(f"[CLASSIFY] Skipping section labeled {section.labels}")
    return ""


class FillerResolver:
    """
    Turns a show title into its filler episode list.

    A cached record short-circuits everything. Otherwise the catalog is
    fetched (once per process), the title is fuzzy-matched, the matched
    show's page is fetched and its filler section parsed, and the record is
    stored. Concurrent calls for the same title share a single run.
    A ``clear`` also detaches lookups that are still running: their callers
    get the answer, but it is not stored.
    """

    def __init__(
        self,
        source: FillerSource,
        classification_cache: ClassificationCache,
        catalog_cache: CatalogCache | None = None,
        match_threshold: float = MATCH_THRESHOLD,
    ) -> None:
        self.source = source
        self.classification_cache = classification_cache
        self.catalog_cache = catalog_cache or CatalogCache()
        self.match_threshold = match_threshold
        self._in_flight: dict[str, asyncio.Task[ResolutionOutcome]] = {}
        self._generation = 0

    @classmethod
    def from_config(cls, filler_config: dict[str, Any]) -> FillerResolver:
        source = AnimeFillerListSource(
            shows_url=filler_config["shows_url"],
            base_url=filler_config["base_url"],
            timeout=filler_config["request_timeout"],
        )
        return cls(
            source=source,
            classification_cache=ClassificationCache(filler_config["cache_file"]),
            match_threshold=filler_config["match_threshold"],
        )

    async def resolve(self, query_title: str) -> ResolutionOutcome:
        key = cache_key(query_title)
        if key is None:
            logger.info(f"[RESOLVE] '{query_title}' has no searchable characters.")
            return Unresolved(query_title=query_title)

        cached = self.classification_cache.get(key)
        if cached is not None:
            logger.info(f"[RESOLVE] Loaded filler data from cache for '{query_title}'.")
            return cached

        task = self._in_flight.get(key)
        if task is None:
            logger.info(f"[RESOLVE] No filler data cached for '{query_title}'. Fetching...")
            task = asyncio.create_task(
                self._resolve_uncached(key, query_title, self._generation)
            )
            self._in_flight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.info(f"[RESOLVE] Joining in-flight lookup for '{query_title}'.")

        # A cancelled caller must not cancel the lookup other callers share.
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task[ResolutionOutcome]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    async def _resolve_uncached(
        self, key: str, query_title: str, generation: int
    ) -> ResolutionOutcome:
        try:
            catalog = await self.catalog_cache.get_entries(self.source)
        except CatalogUnavailable as e:
            return Failed(query_title, FailureReason.CATALOG_UNAVAILABLE, str(e))

        match = find_best_match(query_title, catalog, self.match_threshold)
        if match is None:
            return Unresolved(
                query_title=query_title,
                suggestions=tuple(suggest_titles(query_title, catalog)),
            )

        try:
            sections = await self.source.fetch_classification(match.entry.locator)
        except ClassificationUnavailable as e:
            return Failed(query_title, FailureReason.CLASSIFICATION_UNAVAILABLE, str(e))

        filler_text = select_filler_text(sections)
        if not filler_text:
            logger.info(f"[CLASSIFY] No filler section found for '{match.entry.title}'.")
        episodes = parse_episode_ranges(filler_text)

        record = ClassificationRecord(
            query_title=query_title,
            matched_title=match.entry.title,
            locator=match.entry.locator,
            filler_episodes=tuple(episodes),
        )
        if generation != self._generation:
            logger.info(
                f"[RESOLVE] Stored filler data was cleared during the lookup for "
                f"'{query_title}'; not storing the result."
            )
            return record
        await self.classification_cache.set(key, record)
        return record

    async def lookup_match(self, query_title: str) -> MatchResult | Unresolved | Failed:
        """Finds the catalog entry for a title without fetching its filler list."""
        try:
            catalog = await self.catalog_cache.get_entries(self.source)
        except CatalogUnavailable as e:
            return Failed(query_title, FailureReason.CATALOG_UNAVAILABLE, str(e))

        match = find_best_match(query_title, catalog, self.match_threshold)
        if match is None:
            return Unresolved(
                query_title=query_title,
                suggestions=tuple(suggest_titles(query_title, catalog)),
            )
        return match

    async def check_episode(self, query_title: str, episode: int) -> FillerVerdict:
        outcome = await self.resolve(query_title)
        verdict = FillerVerdict(outcome=outcome, episode=episode)
        if isinstance(outcome, ClassificationRecord):
            logger.info(
                f"[RESOLVE] Episode {episode} of '{query_title}' is "
                f"{'FILLER' if verdict.is_filler else 'not filler'}."
            )
        return verdict

    async def clear(self) -> int:
        self._generation += 1
        self._in_flight.clear()
        return await self.classification_cache.clear()

    async def shutdown(self) -> None:
        """Cancels unfinished lookups and closes the source's connections."""
        pending = [task for task in self._in_flight.values() if not task.done()]
        if pending:
            logger.info(f"[RESOLVE] Cancelling {len(pending)} in-flight lookups...")
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
        self._in_flight.clear()
        await self.source.aclose()
