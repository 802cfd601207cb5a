"""Per-request ordered event channel between the chat loop and the transport."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from .models import (
    ChunkEvent,
    DoneEvent,
    ErrorEvent,
    StreamEvent,
    ToolEndEvent,
    ToolStartEvent,
)

logger = logging.getLogger(__name__)


class EventEmitter:
    """Single-producer channel backed by an ``asyncio.Queue``.

    Delivery is best effort: once the consumer has detached, sends are dropped
    and the producer keeps running. Nothing is delivered after ``Done``.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[StreamEvent] = asyncio.Queue()
        self._done = False
        self._detached = False

    @property
    def done(self) -> bool:
        return self._done

    @property
    def detached(self) -> bool:
        return self._detached

    def send(self, event: StreamEvent) -> None:
        if self._done:
            logger.warning("Dropping %s event sent after done", event.type)
            return
        if isinstance(event, DoneEvent):
            self._done = True
        if self._detached:
            logger.debug("Consumer gone, discarding %s event", event.type)
            return
        self._queue.put_nowait(event)

    def chunk(self, content: str) -> None:
        self.send(ChunkEvent(content=content))

    def tool_start(self, tool: str, query: str) -> None:
        self.send(ToolStartEvent(tool=tool, query=query))

    def tool_end(self, tool: str, success: bool) -> None:
        self.send(ToolEndEvent(tool=tool, success=success))

    def error(self, message: str) -> None:
        self.send(ErrorEvent(message=message))

    def finish(self) -> None:
        self.send(DoneEvent())

    def detach(self) -> None:
        """Mark the consumer as gone; later sends are silently discarded."""
        self._detached = True

    async def events(self) -> AsyncIterator[StreamEvent]:
        """Yield events in arrival order, ending after ``Done``."""
        while True:
            event = await self._queue.get()
            yield event
            if isinstance(event, DoneEvent):
                return
