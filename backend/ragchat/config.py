from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)

_DEFAULT_SOURCE_URLS = [
    "https://en.wikipedia.org/wiki/Formula_One",
    "https://en.wikipedia.org/wiki/2023_Formula_One_World_Championship",
    "https://en.wikipedia.org/wiki/2022_Formula_One_World_Championship",
    "https://en.wikipedia.org/wiki/List_of_Formula_One_World_Drivers%27_Champions",
    "https://www.formula1.com/en/latest/all",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "RAG Chat API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Astra DB (vector store). Required in practice; empty values surface
    # as failures on the first Data API call.
    astra_db_namespace: str = ""
    astra_db_collection: str = ""
    astra_db_api_endpoint: str = ""
    astra_db_application_token: str = ""

    # Chat completions (OpenAI-compatible)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    chat_model: str = "gpt-4"

    # Embeddings
    embedding_provider: str = "nomic"        # nomic | openai
    nomic_api_token: str = ""
    nomic_base_url: str = "https://api-atlas.nomic.ai"
    embedding_model: str = "nomic-embed-text-v1.5"
    embedding_dimensions: int = 768

    # Retrieval / collection
    vector_metric: str = "dot_product"       # dot_product | cosine | euclidean
    retrieval_top_k: int = 10
    assistant_topic: str = "Formula One"

    # Ingestion
    source_urls: list[str] = _DEFAULT_SOURCE_URLS
    chunk_size: int = 512
    chunk_overlap: int = 100

    # Scraper (Playwright)
    scraper_timeout: int = 30
    scraper_headless: bool = True

    http_timeout_seconds: float = 120.0

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_pipeline: str = "INFO"         # ingestion progress
    log_level_providers: str = "INFO"        # embedding / chat / vector store adapters

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
