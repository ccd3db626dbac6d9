# filler_bot/services/title_matcher.py

import re
from collections.abc import Sequence

from rapidfuzz.distance import Levenshtein
from thefuzz import fuzz, process

from ..config import logger
from .models import CatalogEntry, MatchResult

EXACT_MATCH_SCORE = 1.0
SUBSTRING_MATCH_SCORE = 0.9
# Below this a candidate is treated as a different show.
MATCH_THRESHOLD = 0.5
# thefuzz scores run 0-100.
SUGGESTION_MIN_SCORE = 60

_NON_ALNUM_PATTERN = re.compile(r"[^\w\s]|_")


def normalize_title(text: str) -> str:
    """Lowercases ``text``, drops everything but letters, digits and spaces, trims."""
    return _NON_ALNUM_PATTERN.sub("", (text or "").lower()).strip()


def _similarity(a: str, b: str) -> float:
    """Scores two already-normalized titles."""
    if a == b:
        return EXACT_MATCH_SCORE
    if a in b or b in a:
        return SUBSTRING_MATCH_SCORE
    distance = Levenshtein.distance(a, b)
    return 1 - distance / max(len(a), len(b), 1)


def score_title(query: str, candidate_title: str) -> float:
    """
    Scores how well ``candidate_title`` matches ``query``, from 0.0 to 1.0.

    The first applicable rule wins: identical normalized titles score 1.0,
    one containing the other scores 0.9, and anything else scores one minus
    the edit distance divided by the longer title's length.
    """
    return _similarity(normalize_title(query), normalize_title(candidate_title))


def find_best_match(
    query: str,
    candidates: Sequence[CatalogEntry],
    threshold: float = MATCH_THRESHOLD,
) -> MatchResult | None:
    """
    Returns the highest scoring catalog entry for ``query``, or ``None``.

    Only a strictly higher score replaces the current best, so when two
    entries tie the one listed first in the catalog wins. ``None`` is
    returned when the best score is below ``threshold``.
    """
    normalized_query = normalize_title(query)
    if not normalized_query:
        logger.info(f"[MATCH] '{query}' has no searchable characters.")
        return None

    best: MatchResult | None = None
    for entry in candidates:
        normalized_title = normalize_title(entry.title)
        # An empty title is a substring of every query.
        if not normalized_title:
            continue
        score = _similarity(normalized_query, normalized_title)
        if best is None or score > best.score:
            best = MatchResult(entry=entry, score=score)
            if score == EXACT_MATCH_SCORE:
                break

    if best is None or best.score < threshold:
        logger.info(
            f"[MATCH] No catalog entry for '{query}' cleared {threshold} "
            f"(best: {best.score if best else 0.0:.2f})."
        )
        return None

    logger.info(
        f"[MATCH] Matched '{query}' to '{best.entry.title}' (score {best.score:.2f})."
    )
    return best


def suggest_titles(
    query: str, candidates: Sequence[CatalogEntry], limit: int = 3
) -> list[str]:
    """Lists catalog titles that look like ``query``, best first."""
    titles = list(dict.fromkeys(entry.title for entry in candidates if entry.title))
    if not titles or not normalize_title(query):
        return []
    results = process.extract(query, titles, scorer=fuzz.token_set_ratio, limit=limit)
    return [title for title, score in results if score >= SUGGESTION_MIN_SCORE]
