"""Tool protocol, the search/fetch tools and the registry that dispatches to them."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Protocol

from ..config import MAX_OUTPUT_CHARS, SEARCH_RESULT_COUNT
from ..errors import ToolProviderError
from ..models import FetchedPage, SearchResult, ToolCall, ToolResult
from .fetch import extract_text, format_fetch_error, format_fetch_result, is_allowed_url
from .search import format_search_error, format_search_results

logger = logging.getLogger(__name__)


class SearchProvider(Protocol):
    async def search(self, query: str, count: int) -> list[SearchResult]: ...


class FetchProvider(Protocol):
    async def fetch(self, url: str) -> FetchedPage: ...


class BaseTool(ABC):
    """Base class for tools the model can request through inline markup."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def execute(self, argument: str) -> ToolResult:
        """Run the tool. Provider failures must come back as ``success=False``."""
        ...

    def format_error(self, argument: str, error: str) -> str:
        return f"[Tool Result: {self.name}]\nError: {error}\n[End Tool Result]"


class SearchTool(BaseTool):
    """Web search returning a numbered list of title/url/snippet entries."""

    def __init__(self, provider: SearchProvider, result_count: int = SEARCH_RESULT_COUNT):
        self._provider = provider
        self._result_count = result_count

    @property
    def name(self) -> str:
        return "search"

    def format_error(self, argument: str, error: str) -> str:
        return format_search_error(error)

    async def execute(self, argument: str) -> ToolResult:
        logger.debug("Executing search: %s", argument)
        try:
            results = await self._provider.search(argument, self._result_count)
        except ToolProviderError as e:
            logger.error("Search failed: %s", e)
            return ToolResult(tool=self.name, success=False, content=format_search_error(str(e)))
        return ToolResult(
            tool=self.name,
            success=True,
            content=format_search_results(argument, results[: self._result_count]),
        )


class FetchTool(BaseTool):
    """Fetch a page and return its readable text."""

    def __init__(self, provider: FetchProvider, max_chars: int = MAX_OUTPUT_CHARS):
        self._provider = provider
        self._max_chars = max_chars

    @property
    def name(self) -> str:
        return "fetch"

    def format_error(self, argument: str, error: str) -> str:
        return format_fetch_error(argument, error)

    async def execute(self, argument: str) -> ToolResult:
        logger.debug("Executing fetch: %s", argument)
        if not is_allowed_url(argument):
            return ToolResult(
                tool=self.name,
                success=False,
                content=format_fetch_error(argument, "Invalid URL: must start with http:// or https://"),
            )
        try:
            page = await self._provider.fetch(argument)
        except ToolProviderError as e:
            logger.error("Fetch failed: %s", e)
            return ToolResult(tool=self.name, success=False, content=format_fetch_error(argument, str(e)))

        text = extract_text(page.body.decode("utf-8", errors="replace"))
        return ToolResult(
            tool=self.name,
            success=True,
            content=format_fetch_result(argument, page.content_type, text, self._max_chars),
        )


class ToolExecutor:
    """Registry mapping tool names to tools. ``execute`` never raises."""

    def __init__(self, tools: list[BaseTool]):
        self._tools = {t.name: t for t in tools}

    async def execute(self, call: ToolCall) -> ToolResult:
        tool = self._tools.get(call.name)
        if tool is None:
            return ToolResult(
                tool=call.name,
                success=False,
                content=f"[Tool Result: {call.name}]\nError: Unknown tool: {call.name}\n[End Tool Result]",
            )
        try:
            return await tool.execute(call.argument)
        except Exception as e:
            logger.exception("Tool %s raised unexpectedly", call.name)
            return ToolResult(tool=tool.name, success=False, content=tool.format_error(call.argument, str(e)))


def build_default_executor(search_provider: SearchProvider, fetch_provider: FetchProvider) -> ToolExecutor:
    """Executor with the search and fetch tools bound to the given providers."""
    return ToolExecutor([SearchTool(search_provider), FetchTool(fetch_provider)])
