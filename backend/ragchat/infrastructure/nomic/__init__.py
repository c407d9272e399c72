"""Nomic infrastructure package."""

from .nomic_embedding_provider import NomicEmbeddingProvider

__all__ = ["NomicEmbeddingProvider"]
