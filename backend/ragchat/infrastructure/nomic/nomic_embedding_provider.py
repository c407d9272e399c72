"""Nomic Atlas embedding provider — calls the /v1/embedding/text endpoint.

Uses the same httpx client pattern as the chat provider.
Documents are embedded with ``task_type=search_document`` and queries with
``task_type=search_query`` so both live in the same vector space.
"""

import logging
from typing import Any

import httpx

from ragchat.application.interfaces.embedding_provider import EmbeddingProvider
from ragchat.domain.exceptions import EmbeddingProviderError

logger = logging.getLogger(__name__)

_DOCUMENT_TASK = "search_document"
_QUERY_TASK = "search_query"
_MAX_TOKENS_PER_TEXT = 8192


class NomicEmbeddingProvider(EmbeddingProvider):
    """Infrastructure adapter — generates embeddings via the Nomic Atlas API."""

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://api-atlas.nomic.ai",
        model: str = "nomic-embed-text-v1.5",
        dimensions: int = 768,
        timeout: float = 120.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._dimensions = dimensions
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "nomic"

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        return await self._embed(texts, task_type=_DOCUMENT_TASK)

    async def generate_query_embedding(self, query: str) -> list[float]:
        results = await self._embed([query], task_type=_QUERY_TASK)
        return results[0]

    async def _embed(self, texts: list[str], *, task_type: str) -> list[list[float]]:
        if not texts:
            return []

        url = f"{self._base_url}/v1/embedding/text"
        payload: dict[str, Any] = {
            "model": self._model,
            "texts": texts,
            "task_type": task_type,
            "max_tokens_per_text": _MAX_TOKENS_PER_TEXT,
            "dimensionality": self._dimensions,
        }

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(url, headers=self._get_headers(), json=payload)

            if response.status_code != 200:
                error_text = response.text[:500]
                logger.error("Embedding API error %d: %s", response.status_code, error_text)
                raise EmbeddingProviderError(self.provider_name, response.status_code, error_text)

            embeddings = response.json().get("embeddings", [])
            self._check_shape(embeddings, expected_count=len(texts))

            logger.debug(
                "Generated %d embeddings (model=%s, task=%s, dims=%d)",
                len(embeddings),
                self._model,
                task_type,
                self._dimensions,
            )
            return embeddings

        finally:
            if should_close:
                await client.aclose()

    def _check_shape(self, embeddings: list[list[float]], *, expected_count: int) -> None:
        if len(embeddings) != expected_count:
            raise EmbeddingProviderError(
                self.provider_name,
                502,
                f"expected {expected_count} embeddings, got {len(embeddings)}",
            )
        for vector in embeddings:
            if len(vector) != self._dimensions:
                raise EmbeddingProviderError(
                    self.provider_name,
                    502,
                    f"expected {self._dimensions} dimensions, got {len(vector)}",
                )
