# filler_bot/services/scrapers/base_scraper.py

from abc import ABC, abstractmethod

from ..models import CatalogEntry, LabeledSection


class FillerSource(ABC):
    """
    Abstract base class for sites that publish filler classifications.

    Implementations hide all document-structure details; the resolver only
    sees catalog entries and labeled sections.
    """

    @abstractmethod
    async def fetch_catalog(self) -> list[CatalogEntry]:
        """
        Downloads the list of known shows.

        Returns:
            Every show the site lists. Markup drift should shrink this list,
            not raise.

        Raises:
            CatalogUnavailable: The catalog could not be downloaded.
        """

    @abstractmethod
    async def fetch_classification(self, locator: str) -> list[LabeledSection]:
        """
        Downloads a show's classification page and splits it into sections.

        Raises:
            ClassificationUnavailable: The page could not be downloaded.
        """

    async def aclose(self) -> None:
        """Releases any network resources held by the source."""
