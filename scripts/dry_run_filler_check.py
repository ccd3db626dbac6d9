"""
Quick dry-run script to check titles against the live filler list.

Run:
    uv run scripts/dry_run_filler_check.py [--episode N] [--threshold 0.5] [titles...]

This does not start the bot. Records are kept in memory only, so every run
downloads the catalog and the matched shows' pages again.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from filler_bot.services.cache import ClassificationCache
from filler_bot.services.models import ClassificationRecord, Failed, Unresolved
from filler_bot.services.resolution_service import FillerResolver
from filler_bot.services.scrapers.animefillerlist import AnimeFillerListSource
from filler_bot.services.title_matcher import MATCH_THRESHOLD
from filler_bot.ui.messages import format_episode_list


async def _run_for_title(
    resolver: FillerResolver, title: str, episode: int | None
) -> None:
    print("\n===", title, "===")
    outcome = await resolver.resolve(title)

    if isinstance(outcome, Unresolved):
        print("No match. Suggestions:", ", ".join(outcome.suggestions) or "none")
        return
    if isinstance(outcome, Failed):
        print(f"Failed ({outcome.reason.value}): {outcome.detail}")
        return

    assert isinstance(outcome, ClassificationRecord)
    print(f"Matched '{outcome.matched_title}' -> {outcome.locator}")
    print(f"Filler episodes: {format_episode_list(outcome.filler_episodes)}")
    if episode is not None:
        print(f"Episode {episode}: {'FILLER' if outcome.is_filler(episode) else 'not filler'}")


async def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Dry-run filler lookups against animefillerlist.com"
    )
    parser.add_argument(
        "titles",
        nargs="*",
        help="Show titles as a streaming site would print them (e.g., 'Naruto Shippuden')",
    )
    parser.add_argument("--episode", type=int, default=None, help="Episode to check")
    parser.add_argument(
        "--threshold",
        type=float,
        default=MATCH_THRESHOLD,
        help="Minimum match score between 0 and 1",
    )
    args = parser.parse_args(argv)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    titles = args.titles or ["Naruto Shippuden", "One Pece", "Bleach: Thousand-Year Blood War"]

    resolver = FillerResolver(
        source=AnimeFillerListSource(),
        classification_cache=ClassificationCache(),
        match_threshold=args.threshold,
    )
    try:
        for t in titles:
            await _run_for_title(resolver, t, args.episode)
    finally:
        await resolver.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
