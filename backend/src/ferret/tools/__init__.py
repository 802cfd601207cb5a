"""Inline-markup tools: parser, search and fetch providers, executor."""

from .executor import BaseTool, FetchTool, SearchTool, ToolExecutor, build_default_executor
from .fetch import PageFetcher, extract_text
from .parser import has_tool_calls, parse_tool_calls
from .search import BraveSearchClient

__all__ = [
    "BaseTool",
    "BraveSearchClient",
    "FetchTool",
    "PageFetcher",
    "SearchTool",
    "ToolExecutor",
    "build_default_executor",
    "extract_text",
    "has_tool_calls",
    "parse_tool_calls",
]
