"""Tests for the streaming chat endpoint, with fake providers behind it."""

import logging

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from ragchat.application.services import PromptBuilder, RagChatService
from ragchat.domain.exceptions import ChatProviderError, EmbeddingProviderError, VectorStoreError
from ragchat.infrastructure.dependencies import get_rag_chat_service
from ragchat.main import app
from tests.fakes import FakeChatProvider, FakeEmbeddingProvider, FakeVectorStore


def _override_service(chat=None, store=None, embeddings=None) -> FakeChatProvider:
    chat = chat or FakeChatProvider()
    service = RagChatService(
        embedding_provider=embeddings or FakeEmbeddingProvider(),
        vector_store=store or FakeVectorStore(),
        chat_provider=chat,
        prompt_builder=PromptBuilder(),
        model="gpt-4",
    )
    app.dependency_overrides[get_rag_chat_service] = lambda: service
    return chat


@pytest.fixture(autouse=True)
def _clear_overrides():
    yield
    app.dependency_overrides.clear()


async def _post_chat(payload: dict):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post("/api/v1/chat", json=payload)


@pytest.mark.asyncio
async def test_chat_streams_plain_text_answer():
    chat = _override_service(chat=FakeChatProvider(["Max ", "Verstappen ", "won."]))

    response = await _post_chat(
        {"messages": [{"role": "user", "content": "Who won the 2021 championship?"}]}
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "Max Verstappen won."
    assert "QUESTION: Who won the 2021 championship?" in chat.last_messages[0].content


@pytest.mark.asyncio
async def test_chat_answers_when_vector_search_fails():
    chat = _override_service(store=FakeVectorStore(search_error=VectorStoreError("find", "timeout")))

    response = await _post_chat({"messages": [{"role": "user", "content": "What is DRS?"}]})

    assert response.status_code == 200
    assert response.text == "Max Verstappen."
    assert "START CONTEXT\n[]\nEND CONTEXT" in chat.last_messages[0].content


@pytest.mark.asyncio
async def test_chat_without_user_message_is_422():
    _override_service()

    response = await _post_chat({"messages": [{"role": "assistant", "content": "Hello!"}]})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_chat_with_empty_messages_is_422():
    _override_service()

    response = await _post_chat({"messages": []})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_chat_provider_failure_is_502():
    _override_service(chat=FakeChatProvider(error=ChatProviderError("openai", 401, "bad key")))

    response = await _post_chat({"messages": [{"role": "user", "content": "Who is Alonso?"}]})

    assert response.status_code == 502
    assert "bad key" not in response.text


@pytest.mark.asyncio
async def test_embedding_failure_is_502():
    class _BrokenEmbeddings(FakeEmbeddingProvider):
        async def generate_query_embedding(self, query):
            raise EmbeddingProviderError("nomic", 500, "upstream down")

    _override_service(embeddings=_BrokenEmbeddings())

    response = await _post_chat({"messages": [{"role": "user", "content": "Who is Piastri?"}]})

    assert response.status_code == 502


@pytest.mark.asyncio
async def test_empty_answer_is_empty_200():
    _override_service(chat=FakeChatProvider([]))

    response = await _post_chat({"messages": [{"role": "user", "content": "Anything?"}]})

    assert response.status_code == 200
    assert response.text == ""


class _DroppingChatProvider(FakeChatProvider):
    """Yields one fragment, then loses the upstream connection."""

    async def stream(self, messages, model, *, temperature=None, max_tokens=None):
        self.last_messages = list(messages)
        yield "Lewis "
        raise httpx.ReadTimeout("upstream read timed out")


@pytest.mark.asyncio
async def test_transport_failure_mid_stream_ends_stream_and_is_logged(caplog):
    _override_service(chat=_DroppingChatProvider())

    with caplog.at_level(logging.ERROR, logger="ragchat.presentation.api.v1.endpoints.chat"):
        response = await _post_chat({"messages": [{"role": "user", "content": "Who is Hamilton?"}]})

    assert response.status_code == 200
    assert response.text == "Lewis "
    failures = [r for r in caplog.records if r.name == "ragchat.presentation.api.v1.endpoints.chat"]
    assert failures
    assert failures[-1].exc_info is not None
    assert isinstance(failures[-1].exc_info[1], httpx.ReadTimeout)
