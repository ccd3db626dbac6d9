# filler_bot/handlers/error_handler.py

import time

from telegram import Update
from telegram.error import NetworkError, TimedOut
from telegram.ext import ContextTypes

from ..config import logger

# Transient Telegram network errors are logged at most once per window.
TRANSIENT_LOG_WINDOW_SECONDS = 60.0
_LAST_TRANSIENT_LOG: dict[str, float] = {}


def _should_log_transient(error: Exception) -> bool:
    key = type(error).__name__
    now = time.monotonic()
    last = _LAST_TRANSIENT_LOG.get(key)
    if last is not None and now - last < TRANSIENT_LOG_WINDOW_SECONDS:
        return False
    _LAST_TRANSIENT_LOG[key] = now
    return True


async def global_error_handler(
    update: object, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """
    Catches all unhandled exceptions and logs them with their traceback.
    The user gets a plain-text apology without technical details.
    """
    if not context.error:
        logger.warning("Error handler was called but context.error is None.")
        return

    if isinstance(context.error, (NetworkError, TimedOut)):
        if _should_log_transient(context.error):
            logger.warning(f"Transient Telegram network error: {context.error}")
        return

    logger.error("An unhandled exception occurred:", exc_info=context.error)
    logger.error(
        f"Exception context: update={update!r} "
        f"chat_data={context.chat_data!r} user_data={context.user_data!r}"
    )

    if isinstance(update, Update) and update.effective_message:
        error_text = (
            "❌ An unexpected error occurred.\n\n"
            "The issue has been logged for review. Please try again later."
        )
        try:
            await update.effective_message.reply_text(text=error_text)
        except Exception as e:
            logger.error(f"Failed to send the user-facing error message: {e}")
