# filler_bot/ui/views.py

from __future__ import annotations

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Message

from ..config import logger
from ..services.models import ClassificationRecord, FillerVerdict
from .messages import format_verdict


def build_verdict_keyboard(
    verdict: FillerVerdict, next_episode_url: str | None
) -> InlineKeyboardMarkup | None:
    """
    Buttons for a verdict: the next episode when this one is filler, and a
    link to the filler list whenever the show was resolved.
    """
    rows: list[list[InlineKeyboardButton]] = []
    if verdict.is_filler and next_episode_url:
        rows.append([InlineKeyboardButton("▶️ Next episode", url=next_episode_url)])
    if isinstance(verdict.outcome, ClassificationRecord):
        rows.append(
            [InlineKeyboardButton("📋 Filler list", url=verdict.outcome.locator)]
        )
    return InlineKeyboardMarkup(rows) if rows else None


async def show_verdict(
    message: Message, verdict: FillerVerdict, next_episode_url: str | None = None
) -> None:
    """Edits the progress ``message`` into the verdict and its skip button."""
    text = format_verdict(verdict, next_episode_url)
    reply_markup = build_verdict_keyboard(verdict, next_episode_url)
    if verdict.is_filler:
        logger.info(
            f"Filler verdict sent for episode {verdict.episode} "
            f"(next: {next_episode_url or 'none'})."
        )
    await message.edit_text(text=text, reply_markup=reply_markup)
