"""Retrieval-augmented chat — grounds streamed answers in stored page chunks.

Flow for one request:
    1. Take the latest user message from the conversation
    2. Embed it
    3. Retrieve the top-K nearest records (failures degrade to no context)
    4. Serialize their texts into a JSON context blob
    5. Build the system message from context + question
    6. Stream the chat provider's answer back fragment by fragment
"""

import logging
from collections.abc import AsyncIterator

from ragchat.application.interfaces import ChatProvider, EmbeddingProvider, VectorStore
from ragchat.application.services.prompt_builder import PromptBuilder, serialize_context
from ragchat.domain.entities import ChatMessage, StoredRecord
from ragchat.domain.exceptions import InvalidConversationError

logger = logging.getLogger(__name__)

_DEFAULT_TOP_K = 10


class RagChatService:
    """Application service for context-grounded streaming chat.

    Stateless between requests; all collaborators are injected.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
        chat_provider: ChatProvider,
        prompt_builder: PromptBuilder,
        *,
        model: str,
        top_k: int = _DEFAULT_TOP_K,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._chat_provider = chat_provider
        self._prompt_builder = prompt_builder
        self._model = model
        self._top_k = top_k
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def stream_answer(self, messages: list[ChatMessage]) -> AsyncIterator[str]:
        """Yield the assistant's answer to the latest user message.

        Raises:
            InvalidConversationError: If there is no user message.
            EmbeddingProviderError: If the question cannot be embedded.
            ChatProviderError: If the chat provider fails.
        """
        question = latest_user_message(messages)
        query_vector = await self._embedding_provider.generate_query_embedding(question)

        records = await self._retrieve(query_vector)
        context = serialize_context(records)

        system_message = self._prompt_builder.build_system_message(context, question)
        conversation = [system_message, *messages]

        async for fragment in self._chat_provider.stream(
            conversation,
            self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        ):
            yield fragment

    async def _retrieve(self, query_vector: list[float]) -> list[StoredRecord]:
        """Nearest-neighbour lookup; any failure yields an empty context."""
        try:
            records = await self._vector_store.find_similar(query_vector, limit=self._top_k)
        except Exception as e:
            logger.warning("Vector search failed, answering without context: %s", e)
            return []

        logger.info("Retrieved %d context chunks", len(records))
        return records


def latest_user_message(messages: list[ChatMessage]) -> str:
    """Return the content of the last user message in the conversation."""
    for message in reversed(messages):
        if message.role == "user":
            return message.content
    raise InvalidConversationError("Conversation contains no user message")
