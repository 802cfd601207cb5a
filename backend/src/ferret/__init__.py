"""Ferret: tool-augmented chat loop with streamed progress and in-memory sessions."""

from .events import EventEmitter
from .llm import get_default_provider, set_default_provider
from .loop import LoopOptions, LoopOutcome, run_loop
from .models import (
    FetchCall,
    Message,
    SearchCall,
    Session,
    StreamEvent,
    ToolResult,
)
from .providers import LLMProvider, OllamaProvider, StreamChunk
from .session_store import SessionStore

__all__ = [
    "run_loop",
    "LoopOptions",
    "LoopOutcome",
    "EventEmitter",
    "SessionStore",
    "Message",
    "Session",
    "SearchCall",
    "FetchCall",
    "StreamEvent",
    "ToolResult",
    "LLMProvider",
    "OllamaProvider",
    "StreamChunk",
    "get_default_provider",
    "set_default_provider",
]
