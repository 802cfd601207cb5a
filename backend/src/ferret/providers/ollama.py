"""Ollama completion provider."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import httpx
from ollama import AsyncClient, ResponseError

from ..config import DEFAULT_MODEL, DEFAULT_OLLAMA_URL
from ..errors import CompletionError
from ..models import Message
from .base import LLMProvider, StreamChunk

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (ResponseError, httpx.HTTPError, ConnectionError)


class OllamaProvider(LLMProvider):
    """Ollama-backed provider."""

    def __init__(self, default_model: str = DEFAULT_MODEL, base_url: str | None = None):
        self.default_model = default_model
        self.base_url = (base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        self._client: AsyncClient | None = None

    def _get_client(self) -> AsyncClient:
        if self._client is None:
            self._client = AsyncClient(host=self.base_url)
        return self._client

    async def chat(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
    ) -> str:
        model_name = model or self.default_model
        logger.debug("Sending chat request to Ollama (%s, %d messages)", model_name, len(messages))
        try:
            response = await self._get_client().chat(
                model=model_name,
                messages=[m.to_chat_dict() for m in messages],
                stream=False,
            )
        except _TRANSPORT_ERRORS as e:
            raise CompletionError(f"Ollama error: {e}") from e
        return response.message.content or ""

    async def stream_chat(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        model_name = model or self.default_model
        content_parts: list[str] = []
        try:
            stream = await self._get_client().chat(
                model=model_name,
                messages=[m.to_chat_dict() for m in messages],
                stream=True,
            )
            async for chunk in stream:
                delta = chunk.message.content or ""
                if delta:
                    content_parts.append(delta)
                    yield StreamChunk(type="text_delta", content=delta)
                if chunk.done:
                    break
        except _TRANSPORT_ERRORS as e:
            raise CompletionError(f"Ollama error: {e}") from e
        yield StreamChunk(type="done", content="".join(content_parts))

    async def check_health(self) -> bool:
        try:
            await self._get_client().list()
        except ResponseError as e:
            logger.warning("Ollama health check returned %s", e.status_code)
            return False
        except (httpx.HTTPError, ConnectionError) as e:
            logger.error("Ollama health check failed: %s", e)
            raise CompletionError(str(e)) from e
        return True
