# filler_bot/state.py

from telegram.ext import Application

from .config import logger
from .services.resolution_service import FillerResolver


async def post_init(application: Application) -> None:
    """
    Loads the stored filler lists once the bot has been initialized, so that
    cache hits never touch the disk afterwards.
    This function is called by the ApplicationBuilder.
    """
    resolver: FillerResolver | None = application.bot_data.get("RESOLVER")
    if resolver is None:
        logger.warning("post_init: No resolver registered in bot_data.")
        return

    logger.info("--- Loading stored filler lists ---")
    await resolver.classification_cache.load()
    logger.info(
        f"--- {len(resolver.classification_cache)} filler lists ready ---"
    )


async def post_shutdown(application: Application) -> None:
    """
    Abandons unfinished filler lookups and closes network connections
    before the bot shuts down.
    This function is called by the ApplicationBuilder.
    """
    logger.info("--- Shutting down: Cancelling in-flight filler lookups ---")
    resolver: FillerResolver | None = application.bot_data.get("RESOLVER")
    if resolver is not None:
        await resolver.shutdown()
    logger.info("--- Shutdown complete. ---")
