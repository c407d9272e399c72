"""Abstract chat provider interface — port for AI provider adapters.

Any OpenAI-compatible completions API can implement this interface.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from ragchat.domain.entities import ChatMessage


class ChatProvider(ABC):
    """Port — defines what the application layer needs from any chat provider."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'openai')."""
        ...

    @abstractmethod
    async def stream(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Send a streaming chat completion request.

        Args:
            messages: The conversation, system message first.
            model: The model identifier.
            temperature: Sampling temperature (0.0–2.0).
            max_tokens: Maximum tokens in the response.

        Yields:
            Text fragments of the assistant reply, in arrival order.

        Raises:
            ChatProviderError: If the provider returns an error.
        """
        ...
