"""Chat endpoint — streams a context-grounded answer as plain text."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from ragchat.application.schemas import ChatRequest, ErrorResponse
from ragchat.application.services import RagChatService
from ragchat.domain.entities import ChatMessage
from ragchat.domain.exceptions import (
    ChatProviderError,
    EmbeddingProviderError,
    InvalidConversationError,
)
from ragchat.infrastructure.dependencies import get_rag_chat_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post(
    "",
    response_class=StreamingResponse,
    responses={
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def chat(
    request: ChatRequest,
    service: RagChatService = Depends(get_rag_chat_service),
) -> StreamingResponse:
    """Answer the latest user message, streaming text fragments as they arrive.

    The first fragment is awaited before the response starts so that
    embedding and provider failures still map to an HTTP error status.
    """
    messages = [ChatMessage(role=m.role, content=m.content) for m in request.messages]
    fragments = service.stream_answer(messages)

    try:
        first = await anext(fragments)
    except StopAsyncIteration:
        first = ""
    except InvalidConversationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (ChatProviderError, EmbeddingProviderError) as e:
        logger.error("Chat request failed at provider: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The answer could not be generated. Please try again later.",
        )
    except Exception:
        logger.exception("Chat request failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="The answer could not be generated. Please try again later.",
        )

    async def relay():
        if first:
            yield first
        try:
            async for fragment in fragments:
                yield fragment
        except ChatProviderError as e:
            logger.error("Chat stream interrupted: %s", e)
        except Exception:
            logger.exception("Chat stream failed after the response started")

    return StreamingResponse(
        relay(),
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
