# filler_bot/handlers/message_handlers.py

from telegram import Message, Update
from telegram.error import BadRequest
from telegram.ext import ContextTypes

from ..config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_WATCH_PATH_MARKER, logger
from ..services.auth_service import is_user_authorized
from ..services.models import MissingPageContext
from ..services.resolution_service import FillerResolver
from ..services.scrapers.page_context import fetch_page_context, is_watch_page
from ..ui.views import show_verdict
from ..utils import extract_first_url


async def handle_link_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handles a link to an episode's watch page.

    The page is read for the show title, episode number and next-episode
    link, the show's filler list is resolved, and the reply carries the
    verdict plus a skip button when the episode is filler.
    """
    if not await is_user_authorized(update, context):
        return

    user = update.effective_user
    message = update.message
    if not user or not isinstance(message, Message) or not message.text:
        logger.warning("handle_link_message: Update received without a user or valid message text. Ignoring.")
        return

    url = extract_first_url(message.text)
    filler_config = context.bot_data.get("FILLER_CONFIG", {})
    marker = filler_config.get("watch_path_marker", DEFAULT_WATCH_PATH_MARKER)
    if not url or not is_watch_page(url, marker):
        logger.info(f"User {user.id} sent a link that is not a watch page. Ignoring.")
        return

    logger.info(f"User {user.id} sent a watch page: {url[:70]}...")
    try:
        progress_message = await message.reply_text("✅ Link received. Reading the page...")
    except BadRequest as e:
        logger.warning(f"Could not reply to user message: {e}")
        return

    try:
        page_context = await fetch_page_context(
            url, timeout=filler_config.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)
        )
    except MissingPageContext as e:
        logger.info(f"[PAGE] Declining filler check for {url}: {e}")
        await progress_message.edit_text(
            "❌ I couldn't find the show title and episode number on that page."
        )
        return

    resolver: FillerResolver = context.bot_data["RESOLVER"]
    verdict = await resolver.check_episode(
        page_context.show_title, page_context.episode_number
    )
    await show_verdict(progress_message, verdict, page_context.next_episode_url)
