"""Google Gemini completion provider."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from ..errors import CompletionError
from ..models import Message
from .base import LLMProvider, StreamChunk


class GeminiProvider(LLMProvider):
    """Gemini provider using the google-genai SDK."""

    def __init__(
        self,
        default_model: str = "gemini-2.5-flash",
        api_key: str | None = None,
    ) -> None:
        self.default_model = default_model
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY") or os.getenv(
            "GEMINI_API_KEY",
            "",
        )
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if not self._client:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options={"api_version": "v1beta"},
            )
        return self._client

    @staticmethod
    def _to_gemini_contents(
        messages: list[Message],
    ) -> tuple[list[genai_types.Content], str | None]:
        """Split out the system instruction and map the rest to Gemini contents."""
        contents: list[genai_types.Content] = []
        system_instruction: str | None = None
        for m in messages:
            if m.role == "system":
                system_instruction = (m.content or "").strip() or system_instruction
                continue
            if not m.content:
                continue
            role = "model" if m.role == "assistant" else "user"
            contents.append(genai_types.Content(role=role, parts=[genai_types.Part(text=m.content)]))
        return contents, system_instruction

    async def chat(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
    ) -> str:
        """Non-streaming chat using Gemini generate_content."""
        contents, system_instruction = self._to_gemini_contents(messages)
        config = genai_types.GenerateContentConfig(system_instruction=system_instruction)
        try:
            resp = await self._get_client().aio.models.generate_content(
                model=model or self.default_model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as e:
            raise CompletionError(f"Gemini error: {e}") from e
        return resp.text or ""

    async def stream_chat(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Streaming chat for Gemini; yields text deltas and a final done chunk."""
        contents, system_instruction = self._to_gemini_contents(messages)
        config = genai_types.GenerateContentConfig(system_instruction=system_instruction)
        content_parts: list[str] = []
        try:
            stream = await self._get_client().aio.models.generate_content_stream(
                model=model or self.default_model,
                contents=contents,
                config=config,
            )
            async for chunk in stream:
                text = chunk.text
                if text:
                    content_parts.append(text)
                    yield StreamChunk(type="text_delta", content=text)
        except genai_errors.APIError as e:
            raise CompletionError(f"Gemini error: {e}") from e
        yield StreamChunk(type="done", content="".join(content_parts))
