"""Data models for messages, sessions, tool calls and stream events."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """A single message in a conversation."""

    role: Role
    content: str = ""

    def to_chat_dict(self) -> dict[str, str]:
        """Format for LLM chat APIs."""
        return {"role": self.role, "content": self.content or ""}


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class Session(BaseModel):
    """Conversation state for one session id. Owned by the SessionStore."""

    id: uuid.UUID
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utc_now)
    last_activity: datetime = Field(default_factory=_utc_now)

    def add_message(self, message: Message) -> None:
        self.messages.append(message)
        self.last_activity = _utc_now()

    def clear(self) -> None:
        self.messages.clear()
        self.last_activity = _utc_now()


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SearchCall:
    """Model asked for a web search."""

    query: str
    name: ClassVar[str] = "search"

    @property
    def argument(self) -> str:
        return self.query


@dataclass(frozen=True)
class FetchCall:
    """Model asked for the contents of a page."""

    url: str
    name: ClassVar[str] = "fetch"

    @property
    def argument(self) -> str:
        return self.url


ToolCall = Union[SearchCall, FetchCall]


@dataclass
class ToolResult:
    """Result of a single tool execution. `content` is a delimited text block."""

    tool: str
    success: bool
    content: str


class SearchResult(BaseModel):
    """One web search hit."""

    title: str = ""
    url: str = ""
    snippet: str = ""

    def format_for_context(self) -> str:
        return f"Title: {self.title}\nURL: {self.url}\nSnippet: {self.snippet}"


@dataclass
class FetchedPage:
    """Raw page returned by the fetch provider."""

    url: str
    content_type: str
    body: bytes


# ---------------------------------------------------------------------------
# Stream events
# ---------------------------------------------------------------------------


class ChunkEvent(BaseModel):
    type: Literal["chunk"] = "chunk"
    content: str


class ToolStartEvent(BaseModel):
    type: Literal["tool_start"] = "tool_start"
    tool: str
    query: str


class ToolEndEvent(BaseModel):
    type: Literal["tool_end"] = "tool_end"
    tool: str
    success: bool


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


class DoneEvent(BaseModel):
    type: Literal["done"] = "done"


StreamEvent = Annotated[
    Union[ChunkEvent, ToolStartEvent, ToolEndEvent, ErrorEvent, DoneEvent],
    Field(discriminator="type"),
]

stream_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)


def encode_event(event: StreamEvent) -> str:
    """JSON frame for one event (`{"type": ..., ...}`)."""
    return stream_event_adapter.dump_json(event).decode("utf-8")


def decode_event(raw: str | bytes) -> StreamEvent:
    return stream_event_adapter.validate_json(raw)


def to_sse(event: StreamEvent) -> str:
    """Server-sent-events frame for one event."""
    return f"data: {encode_event(event)}\n\n"
