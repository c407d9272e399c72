"""Ingestion entry point — loads the configured source URLs into the collection.

Run with ``python -m ragchat.ingest`` (or the ``ragchat-ingest`` script).
Takes no arguments; everything comes from the environment.
"""

import asyncio
import logging
import sys

from ragchat.config import Settings, get_settings
from ragchat.application.services import IngestionService, TextSplitter
from ragchat.domain.entities import IngestionReport
from ragchat.infrastructure.capture.playwright_page_scraper import PlaywrightPageScraper
from ragchat.infrastructure.dependencies import (
    build_collection_spec,
    close_clients,
    init_clients,
)
from ragchat.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger(__name__)


async def load_sources(settings: Settings) -> IngestionReport:
    """Scrape, split, embed and store every URL in ``settings.source_urls``."""
    clients = init_clients(settings)
    try:
        async with PlaywrightPageScraper(
            timeout_ms=settings.scraper_timeout * 1000,
            headless=settings.scraper_headless,
        ) as scraper:
            service = IngestionService(
                scraper=scraper,
                splitter=TextSplitter(settings.chunk_size, settings.chunk_overlap),
                embedding_provider=clients.embedding_provider,
                vector_store=clients.vector_store,
                collection=build_collection_spec(settings),
            )
            return await service.run(settings.source_urls)
    finally:
        await close_clients()


def main() -> int:
    settings = get_settings()
    setup_logging(settings)

    try:
        report = asyncio.run(load_sources(settings))
    except Exception as e:
        logger.error("Error during ingestion: %s", e, exc_info=True)
        return 1

    if report.failed_urls:
        logger.warning("Skipped %d URL(s): %s", report.urls_failed, ", ".join(report.failed_urls))
    logger.info(
        "Data loaded successfully: %d records from %d URL(s)",
        report.records_inserted,
        report.urls_total - report.urls_failed,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
