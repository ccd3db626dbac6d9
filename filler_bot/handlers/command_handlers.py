# filler_bot/handlers/command_handlers.py

from telegram import Message, Update
from telegram.ext import ContextTypes

from ..config import logger
from ..services.auth_service import is_user_authorized
from ..services.models import MissingPageContext
from ..services.resolution_service import FillerResolver
from ..services.scrapers.page_context import parse_check_arguments
from ..ui.messages import format_match, get_help_message_text
from ..ui.views import show_verdict


def _command_argument(message: Message) -> str:
    """Returns the text after the command word, e.g. ``"Naruto 45"``."""
    text = (message.text or "").strip()
    _, _, argument = text.partition(" ")
    return argument.strip()


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Sends the list of available commands."""
    if not await is_user_authorized(update, context):
        return
    if not isinstance(update.message, Message):
        return

    await update.message.reply_text(text=get_help_message_text())


async def check_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Answers whether ``<show> <episode>`` is a filler episode."""
    if not await is_user_authorized(update, context):
        return
    message = update.message
    if not isinstance(message, Message):
        return

    try:
        page_context = parse_check_arguments(_command_argument(message))
    except MissingPageContext:
        await message.reply_text(
            text="Usage: check <show> <episode>, e.g. check Naruto 136"
        )
        return

    resolver: FillerResolver = context.bot_data["RESOLVER"]
    progress_message = await message.reply_text(
        f"🔎 Checking {page_context.show_title} episode {page_context.episode_number}..."
    )
    verdict = await resolver.check_episode(
        page_context.show_title, page_context.episode_number
    )
    await show_verdict(progress_message, verdict)


async def match_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Shows which catalog entry a title resolves to."""
    if not await is_user_authorized(update, context):
        return
    message = update.message
    if not isinstance(message, Message):
        return

    title = _command_argument(message)
    if not title:
        await message.reply_text(text="Usage: match <show>, e.g. match One Piece")
        return

    resolver: FillerResolver = context.bot_data["RESOLVER"]
    outcome = await resolver.lookup_match(title)
    await message.reply_text(text=format_match(outcome))


async def clear_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Forgets every stored filler list."""
    if not await is_user_authorized(update, context):
        return
    message = update.message
    if not isinstance(message, Message):
        return

    resolver: FillerResolver = context.bot_data["RESOLVER"]
    removed = await resolver.clear()
    user = update.effective_user
    logger.info(f"User {user.id if user else 'unknown'} cleared {removed} filler lists.")
    await message.reply_text(text=f"🧹 Cleared {removed} stored filler lists.")
