"""Unit tests for application settings configuration."""

from pathlib import Path

from ragchat.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_retrieval_and_splitting_defaults(monkeypatch):
    for name in ("RETRIEVAL_TOP_K", "CHUNK_SIZE", "CHUNK_OVERLAP", "EMBEDDING_DIMENSIONS", "VECTOR_METRIC"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.retrieval_top_k == 10
    assert settings.chunk_size == 512
    assert settings.chunk_overlap == 100
    assert settings.embedding_dimensions == 768
    assert settings.vector_metric == "dot_product"


def test_astra_and_source_urls_read_from_environment(monkeypatch):
    monkeypatch.setenv("ASTRA_DB_NAMESPACE", "default_keyspace")
    monkeypatch.setenv("ASTRA_DB_COLLECTION", "f1gpt")
    monkeypatch.setenv("ASTRA_DB_API_ENDPOINT", "https://db.example.com")
    monkeypatch.setenv("ASTRA_DB_APPLICATION_TOKEN", "AstraCS:abc")
    monkeypatch.setenv("SOURCE_URLS", '["https://a.example.com", "https://b.example.com"]')

    settings = Settings(_env_file=None)

    assert settings.astra_db_namespace == "default_keyspace"
    assert settings.astra_db_collection == "f1gpt"
    assert settings.astra_db_api_endpoint == "https://db.example.com"
    assert settings.astra_db_application_token == "AstraCS:abc"
    assert settings.source_urls == ["https://a.example.com", "https://b.example.com"]
