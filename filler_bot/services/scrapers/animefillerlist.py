# filler_bot/services/scrapers/animefillerlist.py

from __future__ import annotations

import urllib.parse

import httpx
from bs4 import BeautifulSoup, Tag

from ...config import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT, DEFAULT_SHOWS_URL, logger
from ..models import (
    CatalogEntry,
    CatalogUnavailable,
    ClassificationUnavailable,
    LabeledSection,
)
from .base_scraper import FillerSource

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/115.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

# Class fragments that mark an episode category container.
SECTION_CATEGORY_HINTS = ("filler", "canon")


def parse_catalog_html(html: str, base_url: str = DEFAULT_BASE_URL) -> list[CatalogEntry]:
    """
    Extracts every ``/shows/...`` link from the catalog page.

    Links without text are skipped and repeated links keep their first
    occurrence, so catalog order is preserved.
    """
    soup = BeautifulSoup(html, "lxml")
    entries: list[CatalogEntry] = []
    seen: set[str] = set()

    for link in soup.select('a[href^="/shows/"]'):
        if not isinstance(link, Tag):
            continue
        title = link.get_text(" ", strip=True)
        href = link.get("href")
        if not title or not isinstance(href, str):
            continue
        locator = urllib.parse.urljoin(f"{base_url.rstrip('/')}/", href)
        if locator in seen:
            continue
        seen.add(locator)
        entries.append(CatalogEntry(title=title, locator=locator))

    return entries


def _episodes_text(span: Tag) -> str:
    """Joins the episode anchors of an Episodes span, e.g. ``"7, 26, 97-106"``."""
    anchor_texts = [
        a.get_text(strip=True) for a in span.find_all("a") if a.get_text(strip=True)
    ]
    if anchor_texts:
        return ", ".join(anchor_texts)
    return span.get_text(" ", strip=True)


def _section_owner(span: Tag) -> Tag | None:
    classed = span.find_parents(
        lambda tag: isinstance(tag, Tag) and bool(tag.get("class"))
    )
    for tag in classed:
        classes = [str(cls).lower() for cls in tag.get("class") or []]
        if any(hint in cls for cls in classes for hint in SECTION_CATEGORY_HINTS):
            return tag
    return classed[0] if classed else None


def parse_classification_html(html: str) -> list[LabeledSection]:
    """
    Splits a show page into labeled sections.

    Every ``span`` whose class mentions ``Episodes`` starts a section. Its
    labels are the CSS classes of the closest classed ancestor that names a
    category (``filler``, ``manga_canon`` and so on), so extra wrapper
    elements between the two do not hide the section. Without such an
    ancestor the nearest classed one is used. Sections appear in document
    order.
    """
    soup = BeautifulSoup(html, "lxml")
    sections: list[LabeledSection] = []

    for span in soup.find_all("span"):
        if not isinstance(span, Tag):
            continue
        span_classes = span.get("class") or []
        if not any("Episodes" in cls for cls in span_classes):
            continue
        owner = _section_owner(span)
        if owner is None:
            continue
        labels = tuple(str(cls) for cls in owner.get("class") or [])
        sections.append(
            LabeledSection(labels=labels, episodes_text=_episodes_text(span))
        )

    return sections


class AnimeFillerListSource(FillerSource):
    """Reads the show catalog and filler lists from animefillerlist.com."""

    def __init__(
        self,
        shows_url: str = DEFAULT_SHOWS_URL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.shows_url = shows_url
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, headers=REQUEST_HEADERS
            )
        return self._client

    async def _fetch_page(self, url: str) -> str:
        """Fetches ``url`` and returns its text. Raises ``httpx.HTTPError``."""
        logger.debug(f"[SCRAPER] GET {url}")
        response = await self._get_client().get(url)
        logger.debug(f"[SCRAPER] GET {url} -> {response.status_code}")
        response.raise_for_status()
        return response.text

    async def fetch_catalog(self) -> list[CatalogEntry]:
        logger.info(f"[CATALOG] Fetching shows list from {self.shows_url}...")
        try:
            html = await self._fetch_page(self.shows_url)
        except httpx.HTTPError as e:
            logger.error(f"[CATALOG] Could not fetch {self.shows_url}: {e}")
            raise CatalogUnavailable(str(e)) from e

        entries = parse_catalog_html(html, self.base_url)
        logger.info(f"[CATALOG] Loaded {len(entries)} shows.")
        return entries

    async def fetch_classification(self, locator: str) -> list[LabeledSection]:
        logger.info(f"[CLASSIFY] Fetching classification page {locator}")
        try:
            html = await self._fetch_page(locator)
        except httpx.HTTPError as e:
            logger.error(f"[CLASSIFY] Could not fetch {locator}: {e}")
            raise ClassificationUnavailable(str(e)) from e

        sections = parse_classification_html(html)
        logger.info(
            f"[CLASSIFY] Found {len(sections)} labeled sections on {locator}."
        )
        return sections

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
