"""Unit tests for the streaming OpenAIChatProvider."""

import json

import httpx
import pytest

from ragchat.domain.entities import ChatMessage
from ragchat.domain.exceptions import ChatProviderError
from ragchat.infrastructure.openai import OpenAIChatProvider


# ── Helpers ──


def _sse_chunk(content: str | None = None, role: str | None = None) -> str:
    delta: dict = {}
    if role:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    return "data: " + json.dumps({"choices": [{"index": 0, "delta": delta}]})


def _make_sse_mock_transport(
    lines: list[str], captured: list[httpx.Request] | None = None
) -> httpx.MockTransport:
    """Create a mock transport that returns SSE content."""

    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        content = "\n".join(lines) + "\n"
        return httpx.Response(
            200,
            content=content.encode(),
            headers={"content-type": "text/event-stream"},
        )

    return httpx.MockTransport(handler)


def _provider(transport: httpx.MockTransport) -> OpenAIChatProvider:
    return OpenAIChatProvider(
        api_key="sk-test",
        http_client=httpx.AsyncClient(transport=transport),
    )


async def _collect(provider: OpenAIChatProvider, messages: list[ChatMessage]) -> list[str]:
    return [fragment async for fragment in provider.stream(messages, "gpt-4")]


_QUESTION = [ChatMessage(role="user", content="Who won the 2021 championship?")]


# ── Tests ──


@pytest.mark.asyncio
async def test_stream_yields_content_deltas_in_order():
    lines = [
        _sse_chunk(role="assistant"),
        "",
        _sse_chunk("Max "),
        "",
        _sse_chunk("Verstappen"),
        "",
        _sse_chunk("."),
        "",
        "data: [DONE]",
    ]
    provider = _provider(_make_sse_mock_transport(lines))

    assert await _collect(provider, _QUESTION) == ["Max ", "Verstappen", "."]


@pytest.mark.asyncio
async def test_stream_sends_streaming_payload():
    captured: list[httpx.Request] = []
    provider = _provider(_make_sse_mock_transport(["data: [DONE]"], captured))
    messages = [ChatMessage(role="system", content="ctx"), *_QUESTION]

    await _collect(provider, messages)

    request = captured[0]
    assert request.url == "https://api.openai.com/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "gpt-4"
    assert body["stream"] is True
    assert body["messages"] == [
        {"role": "system", "content": "ctx"},
        {"role": "user", "content": "Who won the 2021 championship?"},
    ]
    assert "temperature" not in body


@pytest.mark.asyncio
async def test_stream_skips_comments_and_malformed_lines():
    lines = [
        ": keepalive",
        "event: message",
        "data: {not json",
        _sse_chunk("ok"),
        "data: [DONE]",
        _sse_chunk("after done"),
    ]
    provider = _provider(_make_sse_mock_transport(lines))

    assert await _collect(provider, _QUESTION) == ["ok"]


@pytest.mark.asyncio
async def test_stream_http_error_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})

    provider = _provider(httpx.MockTransport(handler))

    with pytest.raises(ChatProviderError) as exc_info:
        await _collect(provider, _QUESTION)

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Incorrect API key provided"


@pytest.mark.asyncio
async def test_stream_error_event_raises_provider_error():
    lines = [
        _sse_chunk("partial"),
        'data: {"error": {"message": "context length exceeded"}}',
    ]
    provider = _provider(_make_sse_mock_transport(lines))
    received: list[str] = []

    with pytest.raises(ChatProviderError) as exc_info:
        async for fragment in provider.stream(_QUESTION, "gpt-4"):
            received.append(fragment)

    assert received == ["partial"]
    assert "context length exceeded" in exc_info.value.message
