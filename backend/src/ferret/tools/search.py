"""Brave web search client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import BRAVE_SEARCH_URL, SEARCH_TIMEOUT_SECS
from ..errors import SearchError
from ..models import SearchResult

logger = logging.getLogger(__name__)


class BraveSearchClient:
    """Search provider backed by the Brave Search API."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = BRAVE_SEARCH_URL,
        timeout: float = SEARCH_TIMEOUT_SECS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    async def search(self, query: str, count: int) -> list[SearchResult]:
        """Return up to ``count`` results. Raises SearchError on transport or status failure."""
        if not self.api_key:
            raise SearchError("BRAVE_API_KEY is not configured")

        logger.debug("Searching Brave for: %s", query)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    self.base_url,
                    params={"q": query, "count": str(count)},
                    headers={
                        "Accept": "application/json",
                        "X-Subscription-Token": self.api_key,
                    },
                )
        except httpx.HTTPError as e:
            raise SearchError(str(e) or e.__class__.__name__) from e

        if not response.is_success:
            logger.error("Brave search failed: %s - %s", response.status_code, response.text)
            raise SearchError(f"Status {response.status_code}: {response.text}")

        try:
            payload: dict[str, Any] = response.json()
        except ValueError as e:
            raise SearchError(f"Invalid response body: {e}") from e

        raw_results = (payload.get("web") or {}).get("results") or []
        results = [
            SearchResult(
                title=r.get("title") or "",
                url=r.get("url") or "",
                snippet=r.get("description") or "",
            )
            for r in raw_results
            if isinstance(r, dict)
        ]
        return results[:count]


def format_search_results(query: str, results: list[SearchResult]) -> str:
    lines = ["[Tool Result: search]", f'Query: "{query}"', ""]
    if not results:
        lines.append("No results found.")
        lines.append("")
    for i, result in enumerate(results, start=1):
        lines.append(f"{i}. {result.format_for_context()}")
        lines.append("")
    lines.append("[End Tool Result]")
    return "\n".join(lines)


def format_search_error(error: str) -> str:
    return f"[Tool Result: search]\nError: {error}\n[End Tool Result]"
