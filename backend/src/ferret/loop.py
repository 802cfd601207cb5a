"""Main completion/tool loop orchestrator."""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass

from .config import DEFAULT_MAX_TOOL_ITERATIONS
from .events import EventEmitter
from .llm import chat
from .models import Message
from .providers import LLMProvider
from .session_store import SessionStore
from .system_prompt_loader import get_default_system_prompt
from .tools import ToolExecutor, parse_tool_calls

logger = logging.getLogger(__name__)

ITERATION_LIMIT_MESSAGE = "too many tool iterations"


class LoopOutcome(str, enum.Enum):
    """How a single run of the loop ended."""

    ANSWERED = "answered"
    ERRORED = "errored"
    ITERATION_LIMIT = "iteration_limit"


@dataclass
class LoopOptions:
    """Options for the chat loop."""

    model: str | None = None
    max_tool_iterations: int = DEFAULT_MAX_TOOL_ITERATIONS
    system_prompt: str | None = None
    llm_provider: LLMProvider | None = None


def build_messages(system_prompt: str, history: list[Message]) -> list[Message]:
    """System instruction followed by the full history."""
    return [Message(role="system", content=system_prompt), *history]


async def run_loop(
    session_id: uuid.UUID,
    user_message: str,
    *,
    store: SessionStore,
    tools: ToolExecutor,
    emitter: EventEmitter,
    options: LoopOptions | None = None,
) -> LoopOutcome:
    """
    Answer one user message: completion call → run requested tools → repeat,
    at most ``max_tool_iterations`` completion calls.

    Every message is appended to the live session in ``store``. The emitter
    always receives a terminal ``done`` event, preceded by ``chunk`` on success
    or ``error`` on provider failure / iteration exhaustion. A failed provider
    call leaves nothing from that iteration in the history.
    """
    opts = options or LoopOptions()
    system_prompt = opts.system_prompt or get_default_system_prompt()

    logger.info("Handling chat message for session %s", session_id)
    store.append_message(session_id, Message(role="user", content=user_message))

    for iteration in range(opts.max_tool_iterations):
        logger.debug("Tool iteration %d", iteration)
        messages = build_messages(system_prompt, store.snapshot(session_id))

        try:
            response = await chat(messages, model=opts.model, provider=opts.llm_provider)
        except Exception as e:
            logger.error("Completion provider error: %s", e)
            emitter.error(str(e))
            emitter.finish()
            return LoopOutcome.ERRORED

        tool_calls = parse_tool_calls(response)
        if not tool_calls:
            store.append_message(session_id, Message(role="assistant", content=response))
            emitter.chunk(response)
            emitter.finish()
            return LoopOutcome.ANSWERED

        results: list[str] = []
        for call in tool_calls:
            emitter.tool_start(call.name, call.argument)
            result = await tools.execute(call)
            emitter.tool_end(result.tool, result.success)
            results.append(result.content)

        combined = "\n\n".join([response, *results])
        store.append_message(session_id, Message(role="assistant", content=combined))

    logger.warning("Session %s hit the tool iteration limit", session_id)
    emitter.error(ITERATION_LIMIT_MESSAGE)
    emitter.finish()
    return LoopOutcome.ITERATION_LIMIT
