"""Completion providers: pluggable backends for the orchestrator."""

from .base import LLMProvider, StreamChunk
from .gemini_provider import GeminiProvider
from .ollama import OllamaProvider
from .openai_provider import OpenAIProvider

__all__ = [
    "LLMProvider",
    "StreamChunk",
    "OllamaProvider",
    "OpenAIProvider",
    "GeminiProvider",
]
