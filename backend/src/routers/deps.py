"""Request-scoped accessors for objects held on ``app.state``."""

from __future__ import annotations

import uuid

from fastapi import Request

from main_config import Settings
from src.ferret.errors import ValidationError
from src.ferret.providers import LLMProvider
from src.ferret.session_store import SessionStore
from src.ferret.tools import ToolExecutor


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_tools(request: Request) -> ToolExecutor:
    return request.app.state.tools


def get_llm_provider(request: Request) -> LLMProvider:
    return request.app.state.llm_provider


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def parse_session_id(raw: str | None) -> uuid.UUID:
    """Validate a client-supplied session id. Raises ValidationError for missing or malformed ids."""
    if not raw:
        raise ValidationError("Missing session id")
    try:
        return uuid.UUID(raw)
    except ValueError as e:
        raise ValidationError("Invalid session id") from e
