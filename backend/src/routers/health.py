"""Health endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.ferret.errors import CompletionError
from src.ferret.providers import LLMProvider
from src.ferret.session_store import SessionStore

from .deps import get_llm_provider, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str = "ok"
    ollama: str
    sessions: int


@router.get("/health", response_model=HealthResponse)
async def health(
    store: SessionStore = Depends(get_store),
    llm_provider: LLMProvider = Depends(get_llm_provider),
) -> HealthResponse:
    try:
        ollama_status = "connected" if await llm_provider.check_health() else "unhealthy"
    except CompletionError:
        ollama_status = "disconnected"
    return HealthResponse(ollama=ollama_status, sessions=store.count())
