"""Abstract interface (port) for embedding generation."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Port for generating text embeddings — implemented in the infrastructure layer."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'nomic', 'openai')."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Return the dimensionality of the embedding vectors produced by this provider."""
        ...

    @abstractmethod
    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Generate document embedding vectors for a batch of texts.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input text, each of
            length ``dimensions``.

        Raises:
            EmbeddingProviderError: If the provider fails or returns
                vectors of the wrong length.
        """
        ...

    @abstractmethod
    async def generate_query_embedding(self, query: str) -> list[float]:
        """Generate a single embedding for a search query."""
        ...
