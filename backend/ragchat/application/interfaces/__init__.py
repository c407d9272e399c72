from .chat_provider import ChatProvider
from .embedding_provider import EmbeddingProvider
from .page_scraper import PageScraper
from .vector_store import VectorStore

__all__ = [
    "ChatProvider",
    "EmbeddingProvider",
    "PageScraper",
    "VectorStore",
]
