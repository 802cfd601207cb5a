"""OpenAI completion provider."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from typing import Any

import openai
from openai import AsyncOpenAI

from ..errors import CompletionError
from ..models import Message
from .base import LLMProvider, StreamChunk


class OpenAIProvider(LLMProvider):
    """OpenAI-backed provider using the Chat Completions API."""

    def __init__(
        self,
        default_model: str = "gpt-4.1-nano",
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        self.default_model = default_model
        self.api_key = api_key or os.getenv("OPENAI_API_KEY") or ""
        self.base_url = base_url or os.getenv("OPENAI_BASE_URL")
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if not self._client:
            kwargs: dict[str, Any] = {"api_key": self.api_key}
            if self.base_url:
                kwargs["base_url"] = self.base_url
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def chat(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
    ) -> str:
        """Non-streaming chat using OpenAI Chat Completions."""
        try:
            resp = await self._get_client().chat.completions.create(
                model=model or self.default_model,
                messages=[m.to_chat_dict() for m in messages],
            )
        except openai.OpenAIError as e:
            raise CompletionError(f"OpenAI error: {e}") from e
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""

    async def stream_chat(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Streaming chat; yields text deltas and a final done chunk."""
        content_parts: list[str] = []
        try:
            stream = await self._get_client().chat.completions.create(
                model=model or self.default_model,
                messages=[m.to_chat_dict() for m in messages],
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                if delta is not None and delta.content:
                    content_parts.append(delta.content)
                    yield StreamChunk(type="text_delta", content=delta.content)
        except openai.OpenAIError as e:
            raise CompletionError(f"OpenAI error: {e}") from e
        yield StreamChunk(type="done", content="".join(content_parts))
