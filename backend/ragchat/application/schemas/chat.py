"""Pydantic v2 schemas (DTOs) for the chat endpoint."""

from pydantic import BaseModel, Field


class ChatMessageSchema(BaseModel):
    """A chat message as sent by the client."""

    role: str = Field(..., pattern=r"^(system|user|assistant)$")
    content: str


class ChatRequest(BaseModel):
    """Request schema for the streaming chat endpoint."""

    messages: list[ChatMessageSchema] = Field(
        ..., min_length=1, description="Conversation messages, oldest first"
    )


class ErrorResponse(BaseModel):
    """Generic error body for failed chat requests."""

    error: str
    detail: str | None = None
