"""OpenAI-compatible embedding provider — calls the /embeddings endpoint.

``text-embedding-3-*`` models accept a ``dimensions`` parameter, so the
output can be truncated to match the collection's vector dimension.
"""

import logging
from typing import Any

import httpx

from ragchat.application.interfaces.embedding_provider import EmbeddingProvider
from ragchat.domain.exceptions import EmbeddingProviderError

logger = logging.getLogger(__name__)


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Infrastructure adapter — generates embeddings via an OpenAI-style /embeddings API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "text-embedding-3-small",
        dimensions: int = 768,
        timeout: float = 120.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._dimensions = dimensions
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a batch of texts."""
        if not texts:
            return []

        url = f"{self._base_url}/embeddings"
        payload: dict[str, Any] = {
            "model": self._model,
            "input": texts,
            "dimensions": self._dimensions,
            "encoding_format": "float",
        }

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(url, headers=self._get_headers(), json=payload)

            if response.status_code != 200:
                error_text = response.text[:500]
                logger.error("Embedding API error %d: %s", response.status_code, error_text)
                raise EmbeddingProviderError(self.provider_name, response.status_code, error_text)

            embeddings_data = response.json().get("data", [])

            # Sort by index to ensure correct ordering
            embeddings_data.sort(key=lambda x: x.get("index", 0))
            result = [item["embedding"] for item in embeddings_data]

            if len(result) != len(texts):
                raise EmbeddingProviderError(
                    self.provider_name,
                    502,
                    f"expected {len(texts)} embeddings, got {len(result)}",
                )
            for vector in result:
                if len(vector) != self._dimensions:
                    raise EmbeddingProviderError(
                        self.provider_name,
                        502,
                        f"expected {self._dimensions} dimensions, got {len(vector)}",
                    )

            logger.debug(
                "Generated %d embeddings (model=%s, dims=%d)",
                len(result),
                self._model,
                self._dimensions,
            )
            return result

        finally:
            if should_close:
                await client.aclose()

    async def generate_query_embedding(self, query: str) -> list[float]:
        """Generate a single embedding for a search query."""
        results = await self.generate_embeddings([query])
        return results[0]
