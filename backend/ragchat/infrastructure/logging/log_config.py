"""Per-category log levels for the API process and the ingestion script.

Both entry points call ``setup_logging()`` once at startup. Each category
below is driven by one ``LOG_LEVEL_*`` setting, so outbound HTTP chatter or
per-chunk ingestion lines can be turned up or down independently.
"""

import logging
import sys

from ragchat.config import Settings, get_settings

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Settings field -> logger names it controls.
_LOGGER_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("log_level_http", ("httpx", "httpcore")),
    ("log_level_uvicorn", ("uvicorn", "uvicorn.access", "uvicorn.error")),
    (
        "log_level_pipeline",
        ("IngestionPipeline", "ragchat.application.services.ingestion_service"),
    ),
    (
        "log_level_providers",
        (
            "ragchat.infrastructure.nomic",
            "ragchat.infrastructure.openai",
            "ragchat.infrastructure.astra",
            "ragchat.infrastructure.capture",
        ),
    ),
)


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the root level, install a stderr handler if none exists,
    then set every category logger's level."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    # uvicorn installs its own handlers; the ingestion script does not.
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)

    applied = {}
    for field_name, logger_names in _LOGGER_CATEGORIES:
        level = _parse_level(getattr(settings, field_name))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
        applied[field_name] = logging.getLevelName(level)

    logging.getLogger(__name__).debug("Logging configured: root=%s %s", settings.log_level, applied)


def _parse_level(raw: str) -> int:
    """Level name to ``logging`` constant; unknown names fall back to INFO."""
    numeric = getattr(logging, raw.upper(), None)
    return numeric if isinstance(numeric, int) else logging.INFO
