# filler_bot/services/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union


class FillerBotError(Exception):
    """Base class for every error raised by the filler lookup services."""


class CatalogUnavailable(FillerBotError):
    """The show catalog could not be downloaded."""


class ClassificationUnavailable(FillerBotError):
    """A show's classification page could not be downloaded."""


class MissingPageContext(FillerBotError):
    """A watch page (or typed command) did not yield a show title and episode."""


class MalformedRangeToken(FillerBotError):
    """A single token of an episode list is not a number or a number range."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Malformed episode token: {token!r}")
        self.token = token


@dataclass(frozen=True)
class CatalogEntry:
    """One show from the catalog and the URL of its classification page."""

    title: str
    locator: str


@dataclass(frozen=True)
class MatchResult:
    entry: CatalogEntry
    score: float


@dataclass(frozen=True)
class LabeledSection:
    """A block of a classification page: its CSS labels and the raw episode text."""

    labels: tuple[str, ...]
    episodes_text: str


@dataclass(frozen=True)
class ClassificationRecord:
    """
    The resolved filler list for one user-facing title.

    Records are never mutated; a re-fetch replaces the whole record.
    """

    query_title: str
    matched_title: str
    locator: str
    filler_episodes: tuple[int, ...]
    fetched_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def is_filler(self, episode: int) -> bool:
        return episode in self.filler_episodes

    def to_dict(self) -> dict[str, Any]:
        return {
            "query_title": self.query_title,
            "matched_title": self.matched_title,
            "locator": self.locator,
            "filler_episodes": list(self.filler_episodes),
            "fetched_at": self.fetched_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClassificationRecord:
        """Rebuilds a record from ``to_dict`` output. Raises on missing keys."""
        return cls(
            query_title=str(data["query_title"]),
            matched_title=str(data["matched_title"]),
            locator=str(data["locator"]),
            filler_episodes=tuple(int(ep) for ep in data["filler_episodes"]),
            fetched_at=datetime.fromisoformat(data["fetched_at"]),
        )


class FailureReason(Enum):
    CATALOG_UNAVAILABLE = "catalog_unavailable"
    CLASSIFICATION_UNAVAILABLE = "classification_unavailable"


@dataclass(frozen=True)
class Unresolved:
    """No catalog entry cleared the match threshold. Never cached."""

    query_title: str
    suggestions: tuple[str, ...] = ()


@dataclass(frozen=True)
class Failed:
    """A fetch step failed. Never cached and never retried automatically."""

    query_title: str
    reason: FailureReason
    detail: str = ""


ResolutionOutcome = Union[ClassificationRecord, Unresolved, Failed]


@dataclass(frozen=True)
class FillerVerdict:
    outcome: ResolutionOutcome
    episode: int

    @property
    def is_filler(self) -> bool:
        return isinstance(
            self.outcome, ClassificationRecord
        ) and self.outcome.is_filler(self.episode)


@dataclass(frozen=True)
class PageContext:
    """What could be read from a streaming service's watch page."""

    show_title: str
    episode_number: int
    next_episode_url: str | None = None
    page_url: str | None = None
