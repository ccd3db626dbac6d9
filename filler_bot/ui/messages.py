# filler_bot/ui/messages.py

from __future__ import annotations

from ..services.models import (
    Failed,
    FailureReason,
    FillerVerdict,
    MatchResult,
    Unresolved,
)
from ..utils import get_site_name_from_url

MAX_LISTED_EPISODES = 40


def get_help_message_text() -> str:
    """Returns the help message string."""
    return (
        "Here are the available commands:\n\n"
        "check <show> <episode> - Is this episode filler?\n"
        "match <show> - Which show on the filler list does this title map to?\n"
        "clear - Forget every stored filler list.\n"
        "help - Display this message.\n\n"
        "You can also send me a link to an episode's watch page."
    )


def format_episode_list(episodes: tuple[int, ...] | list[int]) -> str:
    """
    Collapses sorted episode numbers back into ranges, e.g. ``1-3, 5``.

    Very long lists are cut short with a count of what was left out.
    """
    if not episodes:
        return "none"

    ranges: list[str] = []
    start = prev = episodes[0]
    for ep in list(episodes[1:]) + [None]:
        if ep is not None and ep == prev + 1:
            prev = ep
            continue
        ranges.append(str(start) if start == prev else f"{start}-{prev}")
        if ep is not None:
            start = prev = ep

    if len(ranges) > MAX_LISTED_EPISODES:
        hidden = len(ranges) - MAX_LISTED_EPISODES
        return ", ".join(ranges[:MAX_LISTED_EPISODES]) + f" (+{hidden} more)"
    return ", ".join(ranges)


def format_unresolved(outcome: Unresolved) -> str:
    lines = [f"🤷 No show on the filler list matches \"{outcome.query_title}\"."]
    if outcome.suggestions:
        lines.append("Did you mean: " + ", ".join(outcome.suggestions) + "?")
    return "\n".join(lines)


def format_failure(outcome: Failed) -> str:
    if outcome.reason is FailureReason.CATALOG_UNAVAILABLE:
        what = "the list of shows"
    else:
        what = "the filler list for this show"
    return (
        f"⚠️ Couldn't download {what} for \"{outcome.query_title}\" right now.\n"
        "Please try again in a bit."
    )


def format_verdict(verdict: FillerVerdict, next_episode_url: str | None = None) -> str:
    """Builds the reply for a filler check, including the skip hint."""
    outcome = verdict.outcome
    if isinstance(outcome, Unresolved):
        return format_unresolved(outcome)
    if isinstance(outcome, Failed):
        return format_failure(outcome)

    if not verdict.is_filler:
        return (
            f"✅ Episode {verdict.episode} of {outcome.matched_title} is not filler.\n"
            f"Filler episodes: {format_episode_list(outcome.filler_episodes)}"
        )

    lines = [f"⏭️ Episode {verdict.episode} of {outcome.matched_title} is filler!"]
    if next_episode_url:
        site = get_site_name_from_url(next_episode_url)
        lines.append(f"Skipping... next episode on {site} below.")
    else:
        lines.append("No next episode available.")
    return "\n".join(lines)


def format_match(outcome: MatchResult | Unresolved | Failed) -> str:
    if isinstance(outcome, Unresolved):
        return format_unresolved(outcome)
    if isinstance(outcome, Failed):
        return format_failure(outcome)
    return (
        f"Watching: {outcome.entry.title} ({outcome.score:.0%} match)\n"
        f"{outcome.entry.locator}"
    )
