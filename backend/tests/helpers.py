"""Shared fakes for the test suite."""
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from src.ferret.errors import CompletionError
from src.ferret.events import EventEmitter
from src.ferret.models import Message, SearchResult, StreamEvent
from src.ferret.providers import LLMProvider, StreamChunk


class ScriptedProvider(LLMProvider):
    """Returns queued replies in order; an Exception in the script is raised instead."""

    def __init__(self, replies: list[str | Exception], delay: float = 0.0, repeat_last: bool = False):
        self.replies = list(replies)
        self.delay = delay
        self.repeat_last = repeat_last
        self.calls: list[list[Message]] = []
        self.models: list[str | None] = []

    async def chat(self, messages: list[Message], *, model: str | None = None) -> str:
        self.calls.append(list(messages))
        self.models.append(model)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.repeat_last and len(self.replies) == 1:
            reply = self.replies[0]
        else:
            reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def stream_chat(self, messages: list[Message], *, model: str | None = None) -> AsyncIterator[StreamChunk]:
        text = await self.chat(messages, model=model)
        yield StreamChunk(type="text_delta", content=text)
        yield StreamChunk(type="done", content=text)


class FakeSearchProvider:
    def __init__(self, results: list[SearchResult] | None = None, error: Exception | None = None):
        self.results = results or []
        self.error = error
        self.queries: list[tuple[str, int]] = []

    async def search(self, query: str, count: int) -> list[SearchResult]:
        self.queries.append((query, count))
        if self.error is not None:
            raise self.error
        return self.results


def provider_failure(message: str = "Ollama error: connection refused") -> CompletionError:
    return CompletionError(message)


async def drain(emitter: EventEmitter) -> list[StreamEvent]:
    return [event async for event in emitter.events()]
