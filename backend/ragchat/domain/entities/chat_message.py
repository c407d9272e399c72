"""Domain entities for chat messages — framework-independent."""

from dataclasses import dataclass


@dataclass
class ChatMessage:
    """A single message in a chat conversation."""

    role: str  # "system" | "user" | "assistant"
    content: str = ""
