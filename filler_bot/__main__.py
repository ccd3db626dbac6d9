# filler_bot/__main__.py

import re

from telegram import Update
from telegram.ext import (
    Application,
    ApplicationBuilder,
    MessageHandler,
    filters,
)

from filler_bot.config import get_configuration, logger
from filler_bot.handlers.command_handlers import (
    check_command,
    clear_command,
    help_command,
    match_command,
)
from filler_bot.handlers.error_handler import global_error_handler
from filler_bot.handlers.message_handlers import handle_link_message
from filler_bot.services.resolution_service import FillerResolver
from filler_bot.state import post_init, post_shutdown


def register_handlers(application: Application) -> None:
    """
    Registers all the command and message handlers for the bot.
    """
    # Commands are matched case-insensitively, with or without a leading slash.
    application.add_handler(
        MessageHandler(
            filters.Regex(re.compile(r"^/?check(\s|$)", re.IGNORECASE)), check_command
        )
    )
    application.add_handler(
        MessageHandler(
            filters.Regex(re.compile(r"^/?match(\s|$)", re.IGNORECASE)), match_command
        )
    )
    application.add_handler(
        MessageHandler(
            filters.Regex(re.compile(r"^/?clear$", re.IGNORECASE)), clear_command
        )
    )
    application.add_handler(
        MessageHandler(
            filters.Regex(re.compile(r"^/?(help|start)$", re.IGNORECASE)), help_command
        )
    )

    # Links to watch pages, ignoring commands
    link_filter = filters.Regex(r"https?://")
    application.add_handler(
        MessageHandler(link_filter & ~filters.COMMAND, handle_link_message)
    )

    application.add_error_handler(global_error_handler)

    logger.info("All handlers have been registered.")


def main() -> None:
    """
    Main function to initialize and run the Telegram bot.
    """
    logger.info("Starting bot...")

    token, allowed_ids, filler_config = get_configuration()

    application = (
        ApplicationBuilder()
        .token(token)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    # Handlers reach shared services through bot_data.
    application.bot_data["ALLOWED_USER_IDS"] = allowed_ids
    application.bot_data["FILLER_CONFIG"] = filler_config
    application.bot_data["RESOLVER"] = FillerResolver.from_config(filler_config)

    register_handlers(application)

    logger.info("Bot startup complete. Starting polling...")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
