# filler_bot/services/episode_ranges.py

import re

from ..config import logger
from .models import MalformedRangeToken

# Classification pages use plain hyphens, but en and em dashes show up in
# hand-edited lists.
_RANGE_SEPARATOR = re.compile(r"\s*[-–—]\s*")
_NUMBER = re.compile(r"\d+")

# Longest-running shows are in the low thousands of episodes.
MAX_EPISODE_SPAN = 5000


def _parse_episode_number(value: str, token: str) -> int:
    if not _NUMBER.fullmatch(value):
        raise MalformedRangeToken(token)
    number = int(value)
    if number < 1:
        raise MalformedRangeToken(token)
    return number


def parse_range_token(token: str) -> range:
    """
    Parses one token of an episode list: ``"7"`` or an inclusive ``"97-106"``.

    A reversed range (``"5-3"``) gives an empty range rather than an error.
    Raises ``MalformedRangeToken`` for anything that is not a positive number
    or a pair of them, and for ranges longer than ``MAX_EPISODE_SPAN``.
    """
    stripped = token.strip()
    parts = _RANGE_SEPARATOR.split(stripped)
    if len(parts) == 1:
        episode = _parse_episode_number(parts[0], token)
        return range(episode, episode + 1)
    if len(parts) == 2:
        start = _parse_episode_number(parts[0], token)
        end = _parse_episode_number(parts[1], token)
        if end - start + 1 > MAX_EPISODE_SPAN:
            raise MalformedRangeToken(token)
        return range(start, end + 1)
    raise MalformedRangeToken(token)


def parse_episode_ranges(text: str) -> list[int]:
    """
    Turns text like ``"1-3, 5, 10-12"`` into ``[1, 2, 3, 5, 10, 11, 12]``.

    The result is sorted and free of duplicates whatever the input order.
    Malformed tokens are logged and skipped so that one bad entry does not
    throw away the rest of the list.
    """
    episodes: set[int] = set()
    if not text or not text.strip():
        return []

    for token in text.split(","):
        if not token.strip():
            continue
        try:
            episodes.update(parse_range_token(token))
        except MalformedRangeToken as e:
            logger.warning(f"[CLASSIFY] Skipping episode token: {e}")

    return sorted(episodes)
