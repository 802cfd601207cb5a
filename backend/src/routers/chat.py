"""Chat router: streamed chat loop and history clearing."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import BaseModel, Field

from main_config import Settings
from src.ferret.config import SESSION_COOKIE_NAME
from src.ferret.errors import ValidationError
from src.ferret.events import EventEmitter
from src.ferret.llm import resolve_provider
from src.ferret.loop import LoopOptions, run_loop
from src.ferret.models import to_sse
from src.ferret.providers import LLMProvider
from src.ferret.session_store import SessionStore
from src.ferret.tools import ToolExecutor

from .deps import get_llm_provider, get_settings, get_store, get_tools, parse_session_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

# Strong references so running loops are not garbage collected mid-flight.
_running_loops: set[asyncio.Task] = set()


class ChatRequest(BaseModel):
    """Request body for POST /chat."""

    message: str = Field(..., description="User message")
    session_id: str | None = Field(
        None, description="Session id; defaults to the session_id cookie"
    )
    model: str | None = Field(
        None,
        description=(
            "Optional model override, e.g. 'openai:gpt-4.1-nano' or "
            "'gemini:gemini-2.5-flash'. Plain names are Ollama models."
        ),
    )


async def event_stream(
    emitter: EventEmitter,
    task: asyncio.Task,
    *,
    cancel_on_disconnect: bool = False,
) -> AsyncIterator[str]:
    """SSE frames for one chat run. Leaving early detaches the emitter and,
    if the policy says so, cancels the loop."""
    try:
        async for event in emitter.events():
            yield to_sse(event)
    finally:
        emitter.detach()
        if cancel_on_disconnect and not emitter.done:
            logger.info("Client disconnected mid-stream, cancelling chat loop")
            task.cancel()


@router.post("/chat")
async def chat(
    request: ChatRequest,
    session_cookie: str | None = Cookie(None, alias=SESSION_COOKIE_NAME),
    store: SessionStore = Depends(get_store),
    tools: ToolExecutor = Depends(get_tools),
    llm_provider: LLMProvider = Depends(get_llm_provider),
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    """Run the chat loop in the background and stream its events as SSE frames."""
    message = request.message.strip()
    if not message:
        raise ValidationError("Message cannot be empty")
    session_id = parse_session_id(request.session_id or session_cookie)
    store.get_or_create(session_id)

    provider, model = resolve_provider(request.model, default=llm_provider)
    opts = LoopOptions(model=model, llm_provider=provider)
    emitter = EventEmitter()
    task = asyncio.create_task(
        run_loop(session_id, message, store=store, tools=tools, emitter=emitter, options=opts)
    )
    _running_loops.add(task)
    task.add_done_callback(_running_loops.discard)

    return StreamingResponse(
        event_stream(emitter, task, cancel_on_disconnect=settings.cancel_on_disconnect),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


@router.post("/clear", response_class=PlainTextResponse)
async def clear(
    session_cookie: str | None = Cookie(None, alias=SESSION_COOKIE_NAME),
    store: SessionStore = Depends(get_store),
) -> PlainTextResponse:
    """Empty the cookie session's history. Unknown or missing ids are a no-op."""
    if session_cookie:
        try:
            store.clear(parse_session_id(session_cookie))
        except ValidationError:
            logger.debug("Ignoring clear for malformed session id")
    return PlainTextResponse("OK", headers={"HX-Trigger": "chat-cleared"})
