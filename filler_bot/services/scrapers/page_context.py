# filler_bot/services/scrapers/page_context.py

from __future__ import annotations

import re
import urllib.parse

import httpx
from bs4 import BeautifulSoup

from ...config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_WATCH_PATH_MARKER, logger
from ...utils import extract_episode_number
from ..models import MissingPageContext, PageContext
from .animefillerlist import REQUEST_HEADERS

SHOW_TITLE_SELECTOR = '[data-t="show-title-link"] h4'
EPISODE_TITLE_SELECTOR = "h1.title"
NEXT_EPISODE_SELECTOR = '[data-t="next-episode"] a'

# "/check Naruto 45", "/check Naruto | 45", "/check Naruto E45"
_CHECK_ARGS_PATTERN = re.compile(
    r"^(?P<title>.+?)\s*(?:\|\s*)?(?:\b(?:e|ep|episode)\s*\.?\s*)?(?P<episode>\d+)\s*$",
    re.IGNORECASE,
)


def is_watch_page(url: str, marker: str = DEFAULT_WATCH_PATH_MARKER) -> bool:
    """True when ``url`` points at a single episode's player page."""
    try:
        parsed = urllib.parse.urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and marker in parsed.path


def parse_page_context(html: str, page_url: str | None = None) -> PageContext:
    """
    Reads the show title, episode number and next-episode link from a watch page.

    Raises ``MissingPageContext`` when the title or the episode number is
    absent. A missing next-episode link is not an error.
    """
    soup = BeautifulSoup(html, "lxml")

    title_element = soup.select_one(SHOW_TITLE_SELECTOR)
    show_title = title_element.get_text(strip=True) if title_element else ""
    if not show_title:
        raise MissingPageContext("Could not find the show title on the page.")

    episode_element = soup.select_one(EPISODE_TITLE_SELECTOR)
    episode_title = episode_element.get_text(strip=True) if episode_element else ""
    episode_number = extract_episode_number(episode_title)
    if episode_number is None:
        raise MissingPageContext(
            f"Could not read an episode number from '{episode_title}'."
        )

    next_url: str | None = None
    next_link = soup.select_one(NEXT_EPISODE_SELECTOR)
    href = next_link.get("href") if next_link else None
    if isinstance(href, str) and href:
        next_url = urllib.parse.urljoin(page_url, href) if page_url else href

    return PageContext(
        show_title=show_title,
        episode_number=episode_number,
        next_episode_url=next_url,
        page_url=page_url,
    )


async def fetch_page_context(
    url: str, timeout: float = DEFAULT_REQUEST_TIMEOUT
) -> PageContext:
    """Downloads a watch page and extracts its ``PageContext``."""
    logger.info(f"[PAGE] Reading watch page {url}")
    try:
        async with httpx.AsyncClient(
            timeout=timeout, follow_redirects=True, headers=REQUEST_HEADERS
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            html = response.text
    except httpx.HTTPError as e:
        logger.warning(f"[PAGE] Could not fetch {url}: {e}")
        raise MissingPageContext(f"Could not load the page: {e}") from e

    context = parse_page_context(html, page_url=url)
    logger.info(
        f"[PAGE] '{context.show_title}' episode {context.episode_number} "
        f"(next: {context.next_episode_url or 'none'})"
    )
    return context


def parse_check_arguments(text: str) -> PageContext:
    """
    Reads a show title and episode number from typed text such as
    ``"One Piece 1045"``, ``"One Piece | 1045"`` or ``"One Piece E1045"``.
    """
    match = _CHECK_ARGS_PATTERN.match((text or "").strip())
    if not match:
        raise MissingPageContext("Expected a show title followed by an episode number.")
    title = match.group("title").strip(" |")
    episode = int(match.group("episode"))
    if not title or episode < 1:
        raise MissingPageContext("Expected a show title followed by an episode number.")
    return PageContext(show_title=title, episode_number=episode)
