# filler_bot/config.py

import configparser
import logging
import os
import sys
from typing import Any

# --- Constants ---
DEFAULT_SHOWS_URL = "https://www.animefillerlist.com/shows"
DEFAULT_BASE_URL = "https://www.animefillerlist.com"
DEFAULT_MATCH_THRESHOLD = 0.5
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_CACHE_FILE = "filler_cache.json"
DEFAULT_WATCH_PATH_MARKER = "/watch/"

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)
logging.getLogger("httpx").setLevel(logging.WARNING)


def get_configuration(
    config_path: str = "config.ini",
) -> tuple[str, list[int], dict[str, Any]]:
    """
    Reads the bot token, the allowed user IDs and the filler lookup settings
    from the config.ini file.
    """
    if not os.path.exists(config_path):
        logger.critical(
            f"Configuration file '{config_path}' not found. Please create it."
        )
        sys.exit(1)

    with open(config_path, encoding="utf-8") as f:
        config = configparser.ConfigParser()
        config.read_string(f.read())

    token = config.get("telegram", "bot_token", fallback=None)
    if not token or token == "PLACE_TOKEN_HERE":
        logger.critical(f"Bot token not found or not set in '{config_path}'.")
        sys.exit(1)

    allowed_ids_str = config.get("telegram", "allowed_user_ids", fallback="")
    allowed_ids = (
        [int(id.strip()) for id in allowed_ids_str.split(",") if id.strip()]
        if allowed_ids_str
        else []
    )
    if not allowed_ids:
        logger.info("[CONFIG] No allowed_user_ids set. The bot will answer anyone.")

    filler_config = _load_filler_config(config)

    return token, allowed_ids, filler_config


def _load_filler_config(config: configparser.ConfigParser) -> dict[str, Any]:
    """
    Loads the [filler] section, falling back to defaults for every missing key.

    The match threshold must lie in [0, 1] and the request timeout must be
    positive; anything else is a configuration error.
    """
    section = "filler"
    try:
        threshold = config.getfloat(
            section, "match_threshold", fallback=DEFAULT_MATCH_THRESHOLD
        )
        timeout = config.getfloat(
            section, "request_timeout", fallback=DEFAULT_REQUEST_TIMEOUT
        )
    except ValueError as e:
        logger.critical(f"Invalid number in [{section}] section: {e}")
        raise ValueError(f"Invalid number in [{section}] section: {e}")

    if not 0.0 <= threshold <= 1.0:
        raise ValueError(
            f"'match_threshold' must be between 0 and 1, got {threshold}."
        )
    if timeout <= 0:
        raise ValueError(f"'request_timeout' must be positive, got {timeout}.")

    cache_file = os.path.expanduser(
        config.get(section, "cache_file", fallback=DEFAULT_CACHE_FILE).strip()
    )

    filler_config: dict[str, Any] = {
        "shows_url": config.get(section, "shows_url", fallback=DEFAULT_SHOWS_URL),
        "base_url": config.get(section, "base_url", fallback=DEFAULT_BASE_URL),
        "match_threshold": threshold,
        "request_timeout": timeout,
        "cache_file": cache_file,
        "watch_path_marker": config.get(
            section, "watch_path_marker", fallback=DEFAULT_WATCH_PATH_MARKER
        ),
    }
    logger.info(
        f"[CONFIG] Filler lookups use {filler_config['shows_url']} "
        f"(threshold {threshold}, cache '{cache_file}')."
    )
    return filler_config
