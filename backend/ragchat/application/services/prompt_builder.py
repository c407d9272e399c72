"""System prompt assembly for retrieval-grounded answers."""

import json

from ragchat.domain.entities import ChatMessage, StoredRecord

_SYSTEM_PROMPT_TEMPLATE = """You are an AI assistant who knows everything about {topic}.
Use the below context to augment what you know about {topic}.
The context will provide you with the most recent page data from Wikipedia and other sources.
If the context doesn't include the information you need, answer based on your existing knowledge and don't mention the source of your information or what the context does or doesn't include.
Format responses using markdown where applicable and don't return images.

-----------
START CONTEXT
{context}
END CONTEXT
-----------
QUESTION: {question}
-----------
"""


def serialize_context(records: list[StoredRecord]) -> str:
    """Serialize retrieved texts as a JSON array, preserving rank order."""
    return json.dumps([record.text for record in records], ensure_ascii=False)


class PromptBuilder:
    """Builds the per-query system message from retrieved context."""

    def __init__(self, topic: str = "Formula One"):
        self._topic = topic

    def build_system_message(self, context: str, question: str) -> ChatMessage:
        content = _SYSTEM_PROMPT_TEMPLATE.format(
            topic=self._topic,
            context=context,
            question=question,
        )
        return ChatMessage(role="system", content=content)
