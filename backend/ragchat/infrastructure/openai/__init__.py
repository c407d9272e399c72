"""OpenAI infrastructure package."""

from .openai_chat_provider import OpenAIChatProvider
from .openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OpenAIChatProvider", "OpenAIEmbeddingProvider"]
