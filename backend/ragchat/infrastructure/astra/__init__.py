"""Astra DB infrastructure package."""

from .astra_vector_store import AstraVectorStore

__all__ = ["AstraVectorStore"]
