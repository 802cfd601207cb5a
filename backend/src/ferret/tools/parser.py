"""Extract tool requests from inline markup in model output."""

from __future__ import annotations

import re

from ..models import FetchCall, SearchCall, ToolCall

SEARCH_PATTERN = re.compile(r"<search>(.*?)</search>", re.DOTALL)
FETCH_PATTERN = re.compile(r"<fetch>(.*?)</fetch>", re.DOTALL)


def parse_tool_calls(text: str) -> list[ToolCall]:
    """Return requested tool calls: every search span first, then every fetch span.

    Each group keeps the order the spans appear in. Spans whose content is blank
    are skipped.
    """
    calls: list[ToolCall] = []
    for match in SEARCH_PATTERN.finditer(text):
        query = match.group(1).strip()
        if query:
            calls.append(SearchCall(query=query))
    for match in FETCH_PATTERN.finditer(text):
        url = match.group(1).strip()
        if url:
            calls.append(FetchCall(url=url))
    return calls


def has_tool_calls(text: str) -> bool:
    return bool(SEARCH_PATTERN.search(text) or FETCH_PATTERN.search(text))
