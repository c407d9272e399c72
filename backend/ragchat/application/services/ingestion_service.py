"""Ingestion service — populates the vector collection from a list of URLs.

Pipeline per URL (strictly sequential):
    Scrape → Split → for each chunk: Embed → Upsert

Failure policy:
    - collection conflict: fatal, propagated to the caller
    - scrape failure: the URL is skipped, the run continues
    - embed/insert failure: the chunk is skipped, the URL continues
"""

import logging
import time

from ragchat.application.interfaces import EmbeddingProvider, PageScraper, VectorStore
from ragchat.application.services.text_splitter import TextSplitter
from ragchat.domain.entities import (
    Chunk,
    CollectionSpec,
    IngestionReport,
    StoredRecord,
    make_record_id,
)
from ragchat.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("IngestionPipeline")


class IngestionService:
    """Application service that orchestrates scrape → split → embed → store."""

    def __init__(
        self,
        scraper: PageScraper,
        splitter: TextSplitter,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
        collection: CollectionSpec,
    ):
        self._scraper = scraper
        self._splitter = splitter
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._collection = collection

    async def ensure_collection(self) -> None:
        """Create the target collection; a settings conflict is fatal."""
        with plog.timed_step(
            PipelineStage.COLLECTION,
            f"Creating collection '{self._collection.name}'",
            dimension=self._collection.dimension,
            metric=self._collection.metric.value,
        ):
            await self._vector_store.create_collection(self._collection)

    async def run(self, urls: list[str]) -> IngestionReport:
        """Ingest every URL in order and return the run's counters.

        Raises:
            CollectionConflictError: If the collection exists with other settings.
        """
        start = time.monotonic()
        report = IngestionReport(urls_total=len(urls))

        plog.separator("INGESTION")
        plog.step_start(
            PipelineStage.PIPELINE,
            f"Ingesting {len(urls)} URL(s)",
            collection=self._collection.name,
        )
        await self.ensure_collection()

        for url in urls:
            await self._ingest_into_report(url, report)

        plog.summary(report, time.monotonic() - start)
        return report

    async def ingest_url(self, url: str) -> int:
        """Ingest a single URL. Returns the number of records inserted."""
        report = IngestionReport(urls_total=1)
        await self._ingest_into_report(url, report)
        return report.records_inserted

    async def _ingest_into_report(self, url: str, report: IngestionReport) -> None:
        plog.separator(url)
        try:
            with plog.timed_step(PipelineStage.SCRAPE, f"Scraping {url}"):
                document = await self._scraper.scrape(url)
        except Exception:
            logger.warning("Skipping %s: scrape failed", url)
            report.failed_urls.append(url)
            return

        chunks = self._splitter.split_document(document)
        report.chunks_total += len(chunks)
        plog.step_complete(
            PipelineStage.SPLIT,
            f"Split into {len(chunks)} chunks",
            chars=len(document.text),
            chunk_size=self._splitter.chunk_size,
            overlap=self._splitter.chunk_overlap,
        )

        plog.step_start(
            PipelineStage.EMBED,
            f"Embedding {len(chunks)} chunks",
            provider=self._embedding_provider.provider_name,
            dims=self._embedding_provider.dimensions,
        )
        stored = 0
        for chunk in chunks:
            try:
                record_id = await self._store_chunk(chunk)
            except Exception as e:
                report.chunks_failed += 1
                plog.step_error(
                    PipelineStage.INSERT,
                    f"Chunk {chunk.index} of {url} not stored",
                    error=e,
                )
                continue

            stored += 1
            report.records_inserted += 1
            plog.chunk_progress(
                PipelineStage.INSERT,
                chunk.index,
                len(chunks),
                id=record_id,
                total=report.records_inserted,
            )

        plog.step_complete(PipelineStage.INSERT, f"Stored {stored}/{len(chunks)} chunks", url=url)

    async def _store_chunk(self, chunk: Chunk) -> str:
        [vector] = await self._embedding_provider.generate_embeddings([chunk.text])
        record = StoredRecord(
            record_id=make_record_id(chunk.source_url, chunk.index),
            text=chunk.text,
            vector=vector,
            metadata={"source_url": chunk.source_url, "chunk_index": chunk.index},
        )
        return await self._vector_store.upsert(record)
