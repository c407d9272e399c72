"""OpenAI chat provider — implements the ChatProvider interface.

Communicates with an OpenAI-compatible /chat/completions endpoint using
httpx and SSE streaming. Only the text deltas are relayed to the caller.
"""

import json
import logging
from collections.abc import AsyncIterator

import httpx

from ragchat.application.interfaces.chat_provider import ChatProvider
from ragchat.domain.entities import ChatMessage
from ragchat.domain.exceptions import ChatProviderError

logger = logging.getLogger(__name__)

_DONE_MARKER = "[DONE]"


class OpenAIChatProvider(ChatProvider):
    """Infrastructure adapter — streams chat completions from the OpenAI API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 120.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "openai"

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
        }

    def _build_payload(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict:
        """Build the request payload for a streaming completion."""
        payload: dict = {
            "model": model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "stream": True,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        return payload

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def stream(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Send a streaming chat completion and yield content deltas.

        Skips keepalive comments and chunks without content (role headers,
        finish markers); stops at ``data: [DONE]``.
        """
        payload = self._build_payload(
            messages, model, temperature=temperature, max_tokens=max_tokens
        )
        url = f"{self._base_url}/chat/completions"

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            async with client.stream(
                "POST", url, headers=self._get_headers(), json=payload
            ) as response:
                if response.status_code != 200:
                    body = await response.aread()
                    self._raise_provider_error_from_bytes(response.status_code, body)

                async for line in response.aiter_lines():
                    if not line or line.startswith(":"):
                        continue
                    if not line.startswith("data:"):
                        continue

                    data = line[len("data:"):].strip()
                    if data == _DONE_MARKER:
                        break

                    fragment = self._parse_delta(data)
                    if fragment:
                        yield fragment

        finally:
            if should_close:
                await client.aclose()

    def _parse_delta(self, data: str) -> str | None:
        """Extract the content delta from one SSE data payload."""
        try:
            chunk = json.loads(data)
        except json.JSONDecodeError:
            logger.debug("Ignoring malformed SSE payload: %s", data[:200])
            return None

        if "error" in chunk:
            error = chunk["error"]
            raise ChatProviderError(
                provider=self.provider_name,
                status_code=error.get("code") if isinstance(error.get("code"), int) else 500,
                message=error.get("message", "Unknown streaming error"),
            )

        choices = chunk.get("choices") or []
        if not choices:
            return None
        delta = choices[0].get("delta") or {}
        return delta.get("content")

    def _raise_provider_error_from_bytes(self, status_code: int, body: bytes) -> None:
        """Raise ChatProviderError from raw response bytes."""
        try:
            data = json.loads(body)
            error = data.get("error", {})
            message = error.get("message", body.decode())
        except Exception:
            message = body.decode(errors="replace")

        raise ChatProviderError(
            provider=self.provider_name,
            status_code=status_code,
            message=message,
        )
