from .text_splitter import TextSplitter
from .prompt_builder import PromptBuilder, serialize_context
from .ingestion_service import IngestionService
from .rag_chat_service import RagChatService, latest_user_message

__all__ = [
    "TextSplitter",
    "PromptBuilder",
    "serialize_context",
    "IngestionService",
    "RagChatService",
    "latest_user_message",
]
