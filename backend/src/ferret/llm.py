"""LLM facade: default provider and model-string resolution for the orchestrator."""

from __future__ import annotations

from collections.abc import AsyncIterator

from .config import DEFAULT_MODEL, DEFAULT_OLLAMA_URL
from .models import Message
from .providers import (
    GeminiProvider,
    LLMProvider,
    OllamaProvider,
    OpenAIProvider,
    StreamChunk,
)

_default_provider: LLMProvider | None = None
_provider_cache: dict[str, LLMProvider] = {}


def get_default_provider() -> LLMProvider:
    """Return the default provider (Ollama)."""
    global _default_provider
    if _default_provider is None:
        _default_provider = OllamaProvider(default_model=DEFAULT_MODEL, base_url=DEFAULT_OLLAMA_URL)
    return _default_provider


def set_default_provider(provider: LLMProvider) -> None:
    """Set the provider used when no model hint is given."""
    global _default_provider
    _default_provider = provider


def resolve_provider(
    model: str | None,
    default: LLMProvider | None = None,
) -> tuple[LLMProvider, str | None]:
    """
    Resolve provider and underlying model name from a model string.

    ``default`` stands in for the module-level Ollama provider, so callers
    holding a configured provider keep its host for Ollama model names.

    Expected formats:
    - None / "" → the default provider with its own default model.
    - "provider:model_name" (e.g. "openai:gpt-4.1-nano", "gemini:gemini-2.5-flash")
    - "model_name" → the default (Ollama) provider with that model. Ollama tags
      such as "qwen2.5:7b" contain a colon, so only known provider prefixes split.
    """
    ollama = default or get_default_provider()
    if not model or not model.strip():
        return ollama, None

    prefix, sep, rest = model.partition(":")
    provider_name = prefix.strip().lower()
    if sep and provider_name in ("openai", "gemini", "google", "ollama"):
        model_name = rest.strip() or None
    else:
        return ollama, model.strip()

    if provider_name == "ollama":
        return ollama, model_name

    if provider_name not in _provider_cache:
        if provider_name == "openai":
            _provider_cache[provider_name] = OpenAIProvider()
        else:
            _provider_cache[provider_name] = GeminiProvider()
    return _provider_cache[provider_name], model_name


async def chat(
    messages: list[Message],
    model: str | None = None,
    provider: LLMProvider | None = None,
) -> str:
    """Non-streaming chat. Uses explicit provider if given, otherwise infers from model."""
    if provider is not None:
        return await provider.chat(messages, model=model)
    p, resolved_model = resolve_provider(model)
    return await p.chat(messages, model=resolved_model)


async def stream_chat(
    messages: list[Message],
    model: str | None = None,
    provider: LLMProvider | None = None,
) -> AsyncIterator[StreamChunk]:
    """Stream chat. Uses explicit provider if given, otherwise infers from model."""
    if provider is not None:
        async for chunk in provider.stream_chat(messages, model=model):
            yield chunk
        return

    p, resolved_model = resolve_provider(model)
    async for chunk in p.stream_chat(messages, model=resolved_model):
        yield chunk
