# filler_bot/services/auth_service.py

from telegram import Update
from telegram.ext import ContextTypes

from filler_bot.config import logger


async def is_user_authorized(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> bool:
    """
    Checks the user against ``ALLOWED_USER_IDS`` in the bot's context data.

    An empty allowlist leaves the bot open to everyone. Users outside a
    non-empty allowlist get a rejection message.
    """
    user = update.effective_user
    if not user:
        logger.warning(
            "Authorization check failed: No effective user found in the update."
        )
        return False

    allowed_ids = context.bot_data.get("ALLOWED_USER_IDS", [])
    if allowed_ids and user.id not in allowed_ids:
        logger.warning(
            f"Unauthorized access attempt by user ID: {user.id} ({user.username})"
        )
        await context.bot.send_message(
            chat_id=user.id, text="❌ You are not authorized to use this bot."
        )
        return False

    return True
