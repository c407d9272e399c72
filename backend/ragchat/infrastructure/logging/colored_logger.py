"""Colored ingestion logger.

Ingestion runs are long and mostly unattended, so every URL and chunk
gets one colour-coded console line per stage:

    🗄️ COLLECTION  green     collection creation
    🌐 SCRAPE      yellow    page fetch
    ✂️ SPLIT       magenta   chunking
    🧮 EMBED       blue      embedding calls
    💾 INSERT      green     upserts into the collection
    ⚙️ PIPELINE    white     run start

Failures are always red, timings and counters gray.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any

from ragchat.domain.entities import IngestionReport


class _Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"
    WHITE = "\033[97m"


class PipelineStage:
    """Ingestion stages as ``(label, color, icon)`` tuples."""

    COLLECTION = ("COLLECTION", _Colors.GREEN, "🗄️")
    SCRAPE = ("SCRAPE", _Colors.YELLOW, "🌐")
    SPLIT = ("SPLIT", _Colors.MAGENTA, "✂️")
    EMBED = ("EMBED", _Colors.BLUE, "🧮")
    INSERT = ("INSERT", _Colors.GREEN, "💾")
    PIPELINE = ("PIPELINE", _Colors.WHITE, "⚙️")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


class PipelineLogger:
    """Color-coded progress logger for ingestion runs.

    Usage:
        plog = PipelineLogger("IngestionPipeline")
        plog.separator(url)
        with plog.timed_step(PipelineStage.SCRAPE, f"Scraping {url}"):
            document = await scraper.scrape(url)
        plog.chunk_progress(PipelineStage.INSERT, index, total, id=record_id)
        plog.summary(report, duration)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        line = f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} {color}{message}{_Colors.RESET}"
        self._logger.info(line + _suffix(kwargs))

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        line = f"{color}{icon} [{label}]{_Colors.RESET} {_Colors.GREEN}✓ {message}{_Colors.RESET}"
        self._logger.info(line + _suffix(kwargs))

    def step_error(
        self, stage: tuple[str, str, str], message: str, error: Exception | None = None
    ) -> None:
        """Log a failed step in red, with the exception type and text when given."""
        label = stage[0]
        icon = PipelineStage.ERROR[2]
        line = f"{_Colors.RED}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} {_Colors.RED}{message}{_Colors.RESET}"
        if error is not None:
            line += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(line)

    def chunk_progress(
        self, stage: tuple[str, str, str], index: int, total: int, /, **kwargs: Any
    ) -> None:
        """One line per chunk, numbered from 1."""
        label, color, icon = stage
        line = f"   {color}{icon} [{label}]{_Colors.RESET} {_Colors.GRAY}chunk {index + 1}/{total}{_Colors.RESET}"
        self._logger.info(line + _suffix(kwargs))

    def separator(self, title: str = "") -> None:
        if not title:
            self._logger.info(f"{_Colors.GRAY}{'─' * 60}{_Colors.RESET}")
            return
        tail = "─" * max(0, 50 - len(title))
        self._logger.info(f"{_Colors.GRAY}{'─' * 10} {title} {tail}{_Colors.RESET}")

    def summary(self, report: IngestionReport, duration: float) -> None:
        """Closing line for a run: counters, skipped URLs and elapsed time."""
        self.step_complete(
            PipelineStage.COMPLETE,
            "Ingestion finished",
            urls=report.urls_total,
            failed_urls=report.urls_failed,
            chunks=report.chunks_total,
            inserted=report.records_inserted,
            failed_chunks=report.chunks_failed,
        )
        for url in report.failed_urls:
            self._logger.warning(f"   {_Colors.YELLOW}├─ skipped {url}{_Colors.RESET}")
        self._logger.info(f"   {_Colors.GRAY}📈 duration: {duration:.2f}s{_Colors.RESET}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Wrap a step with start/end lines and its elapsed time.

        Exceptions are logged as a step error and re-raised.
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.step_error(stage, f"{message} failed after {time.perf_counter() - start:.2f}s", error=e)
            raise
        self.step_complete(stage, f"{message} ({time.perf_counter() - start:.2f}s)")


def _suffix(kwargs: dict[str, Any]) -> str:
    if not kwargs:
        return ""
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {_Colors.GRAY}({details}){_Colors.RESET}"
