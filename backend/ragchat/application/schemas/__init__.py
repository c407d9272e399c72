from .chat import ChatMessageSchema, ChatRequest, ErrorResponse

__all__ = [
    "ChatMessageSchema",
    "ChatRequest",
    "ErrorResponse",
]
