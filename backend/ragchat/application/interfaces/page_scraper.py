"""Abstract interface (port) for fetching web pages as plain text."""

from abc import ABC, abstractmethod

from ragchat.domain.entities import SourceDocument


class PageScraper(ABC):
    """Port for page scraping — implemented in the infrastructure layer."""

    @abstractmethod
    async def scrape(self, url: str) -> SourceDocument:
        """Fetch ``url`` and return its body text with HTML tags stripped.

        Raises:
            ScrapeError: If the page cannot be loaded.
        """
        ...
