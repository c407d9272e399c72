"""Process-wide clients and FastAPI dependency injection.

The embedding, vector store and chat clients are built once by
``init_clients()`` (from the FastAPI lifespan or the ingestion entry point)
and shared by every request. They hold no per-request state.
"""

import logging
from dataclasses import dataclass

import httpx

from ragchat.config import Settings, get_settings
from ragchat.application.interfaces import ChatProvider, EmbeddingProvider, VectorStore
from ragchat.application.services import PromptBuilder, RagChatService
from ragchat.domain.entities import CollectionSpec, SimilarityMetric
from ragchat.infrastructure.astra import AstraVectorStore
from ragchat.infrastructure.nomic import NomicEmbeddingProvider
from ragchat.infrastructure.openai import OpenAIChatProvider, OpenAIEmbeddingProvider

logger = logging.getLogger(__name__)


@dataclass
class Clients:
    """The shared client instances for this process."""

    http_client: httpx.AsyncClient
    embedding_provider: EmbeddingProvider
    vector_store: VectorStore
    chat_provider: ChatProvider


_clients: Clients | None = None


def build_embedding_provider(
    settings: Settings, http_client: httpx.AsyncClient | None = None
) -> EmbeddingProvider:
    """Pick the embedding adapter named by ``EMBEDDING_PROVIDER``."""
    provider = settings.embedding_provider.strip().lower()
    if provider == "openai":
        return OpenAIEmbeddingProvider(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
            timeout=settings.http_timeout_seconds,
            http_client=http_client,
        )
    if provider == "nomic":
        return NomicEmbeddingProvider(
            api_token=settings.nomic_api_token,
            base_url=settings.nomic_base_url,
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
            timeout=settings.http_timeout_seconds,
            http_client=http_client,
        )
    raise ValueError(f"Unknown embedding provider: {settings.embedding_provider!r}")


def build_vector_store(
    settings: Settings, http_client: httpx.AsyncClient | None = None
) -> VectorStore:
    return AstraVectorStore(
        api_endpoint=settings.astra_db_api_endpoint,
        token=settings.astra_db_application_token,
        namespace=settings.astra_db_namespace,
        collection=settings.astra_db_collection,
        timeout=settings.http_timeout_seconds,
        http_client=http_client,
    )


def build_chat_provider(
    settings: Settings, http_client: httpx.AsyncClient | None = None
) -> ChatProvider:
    return OpenAIChatProvider(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.http_timeout_seconds,
        http_client=http_client,
    )


def build_collection_spec(settings: Settings) -> CollectionSpec:
    return CollectionSpec(
        name=settings.astra_db_collection,
        dimension=settings.embedding_dimensions,
        metric=SimilarityMetric(settings.vector_metric),
    )


def init_clients(settings: Settings | None = None) -> Clients:
    """Build the shared clients once; later calls return the same instances."""
    global _clients
    if _clients is None:
        settings = settings or get_settings()
        http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        _clients = Clients(
            http_client=http_client,
            embedding_provider=build_embedding_provider(settings, http_client),
            vector_store=build_vector_store(settings, http_client),
            chat_provider=build_chat_provider(settings, http_client),
        )
        logger.info(
            "Clients initialised (embedding=%s, chat=%s, collection=%s)",
            _clients.embedding_provider.provider_name,
            _clients.chat_provider.provider_name,
            settings.astra_db_collection,
        )
    return _clients


def get_clients() -> Clients:
    """Return the shared clients. ``init_clients()`` must have run first."""
    if _clients is None:
        raise RuntimeError("Clients not initialised — call init_clients() first")
    return _clients


async def close_clients() -> None:
    """Close the shared HTTP connection pool."""
    global _clients
    if _clients is not None:
        await _clients.http_client.aclose()
        _clients = None


def get_rag_chat_service() -> RagChatService:
    """Provides a RagChatService wired to the shared clients."""
    settings = get_settings()
    clients = get_clients()
    return RagChatService(
        embedding_provider=clients.embedding_provider,
        vector_store=clients.vector_store,
        chat_provider=clients.chat_provider,
        prompt_builder=PromptBuilder(topic=settings.assistant_topic),
        model=settings.chat_model,
        top_k=settings.retrieval_top_k,
    )
