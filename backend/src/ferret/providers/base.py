"""Abstract completion provider interface for the orchestrator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass

from ..models import Message


@dataclass
class StreamChunk:
    """One chunk from an LLM stream."""

    type: str  # "text_delta" | "done"
    content: str = ""


class LLMProvider(ABC):
    """
    Abstract completion provider. Implement this to plug in any backend.

    The orchestrator only depends on this interface. Implementations raise
    CompletionError for any failed call.
    """

    @abstractmethod
    async def chat(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
    ) -> str:
        """Non-streaming chat. Returns the full response text."""
        ...

    @abstractmethod
    def stream_chat(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Stream chat; yields text deltas and a final done chunk with the full text."""
        ...

    async def check_health(self) -> bool:
        """True when the backend answers. Raises CompletionError when unreachable."""
        return True
