"""Domain entity summarizing one ingestion run."""

from dataclasses import dataclass, field


@dataclass
class IngestionReport:
    """Counters collected while ingesting a list of source URLs."""

    urls_total: int = 0
    chunks_total: int = 0
    records_inserted: int = 0
    chunks_failed: int = 0
    failed_urls: list[str] = field(default_factory=list)

    @property
    def urls_failed(self) -> int:
        return len(self.failed_urls)
