"""Domain-specific exceptions — framework-independent."""


class ChatProviderError(Exception):
    """Raised when a chat provider returns an error.

    Provider-agnostic; carries the upstream status code and message.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")


class EmbeddingProviderError(Exception):
    """Raised when an embedding provider fails or returns malformed vectors."""

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")


class VectorStoreError(Exception):
    """Raised when the vector store rejects a command or is unreachable."""

    def __init__(self, command: str, message: str, error_code: str | None = None):
        self.command = command
        self.message = message
        self.error_code = error_code
        super().__init__(f"{command} failed: {message}")


class CollectionConflictError(VectorStoreError):
    """Raised when a collection already exists with different vector settings."""

    def __init__(self, collection: str, message: str):
        self.collection = collection
        super().__init__(
            "createCollection",
            message,
            error_code="EXISTING_COLLECTION_DIFFERENT_SETTINGS",
        )


class ScrapeError(Exception):
    """Raised when a page cannot be fetched or rendered."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not scrape '{url}': {reason}")


class InvalidConversationError(ValueError):
    """Raised when a conversation carries no user message to answer."""
