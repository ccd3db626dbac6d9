from .animefillerlist import (
    AnimeFillerListSource,
    parse_catalog_html,
    parse_classification_html,
)
from .base_scraper import FillerSource
from .page_context import (
    fetch_page_context,
    is_watch_page,
    parse_check_arguments,
    parse_page_context,
)

__all__ = [
    "AnimeFillerListSource",
    "parse_catalog_html",
    "parse_classification_html",
    "FillerSource",
    "fetch_page_context",
    "is_watch_page",
    "parse_check_arguments",
    "parse_page_context",
]
