# filler_bot/utils.py

import re
from urllib.parse import urlparse

_EPISODE_MARKER_PATTERN = re.compile(r"\bE(?:p(?:isode)?)?\.?\s*(\d+)", re.IGNORECASE)
_URL_PATTERN = re.compile(r"https?://\S+")


def extract_episode_number(text: str) -> int | None:
    """
    Safely extracts the episode number from an episode heading.

    Examples:
        - "E3 - The Hidden Leaf" -> 3
        - "Episode 12: Arrival" -> 12
        - "S2 E07" -> 7

    Returns None when the heading carries no episode marker or the number is 0.
    """
    if not text:
        return None
    match = _EPISODE_MARKER_PATTERN.search(text.strip())
    if not match:
        return None
    number = int(match.group(1))
    return number if number > 0 else None


def extract_first_url(text: str) -> str | None:
    """Returns the first http(s) URL in a message, without trailing punctuation."""
    if not text:
        return None
    match = _URL_PATTERN.search(text)
    if not match:
        return None
    return match.group(0).rstrip(".,;:!?)>]")


def get_site_name_from_url(url: str) -> str:
    """
    Extracts a short, readable site name from a URL.

    Examples:
        - "https://www.crunchyroll.com/watch/..." -> "CRUNCHYROLL"
        - "https://www.animefillerlist.com/shows/naruto" -> "ANIMEFILLERLIST"
    """
    if not url:
        return "Unknown"
    netloc = urlparse(url).netloc
    if not netloc:
        return "Unknown"
    if netloc.startswith("www."):
        netloc = netloc[4:]
    return netloc.partition(".")[0].upper()
