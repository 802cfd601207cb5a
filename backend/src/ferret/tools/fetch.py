"""Page fetching and readable-text extraction."""

from __future__ import annotations

import logging
import re

import httpx
from bs4 import BeautifulSoup

from ..config import FETCH_TIMEOUT_SECS, FETCH_USER_AGENT, MAX_CONTENT_SIZE, MAX_OUTPUT_CHARS
from ..errors import FetchError
from ..models import FetchedPage

logger = logging.getLogger(__name__)

# Tried in order; the first selector with a qualifying region wins.
CONTENT_SELECTORS = (
    "article",
    "main",
    '[role="main"]',
    ".content",
    "#content",
    ".post-content",
    ".article-content",
)
MIN_REGION_CHARS = 100

_WHITESPACE = re.compile(r"\s+")


def is_allowed_url(url: str) -> bool:
    return url.startswith(("http://", "https://"))


class PageFetcher:
    """Fetch provider: GET a page with a timeout and a hard size ceiling."""

    def __init__(
        self,
        *,
        timeout: float = FETCH_TIMEOUT_SECS,
        max_bytes: int = MAX_CONTENT_SIZE,
        user_agent: str = FETCH_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.user_agent = user_agent
        self._transport = transport

    def _too_large(self, size: int) -> FetchError:
        return FetchError(f"Content too large: {size} bytes (max {self.max_bytes})")

    async def fetch(self, url: str) -> FetchedPage:
        if not is_allowed_url(url):
            raise FetchError("Invalid URL: must start with http:// or https://")

        logger.debug("Fetching page: %s", url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self._transport,
            ) as client:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise FetchError(f"HTTP {response.status_code} {response.reason_phrase}".strip())

                    content_type = response.headers.get("content-type", "unknown")

                    declared = response.headers.get("content-length")
                    if declared is not None and declared.isdigit() and int(declared) > self.max_bytes:
                        raise self._too_large(int(declared))

                    body = bytearray()
                    async for chunk in response.aiter_bytes():
                        body.extend(chunk)
                        if len(body) > self.max_bytes:
                            raise self._too_large(len(body))
        except httpx.TimeoutException as e:
            raise FetchError(f"Connection timeout after {self.timeout:g} seconds") from e
        except httpx.HTTPError as e:
            raise FetchError(str(e) or e.__class__.__name__) from e

        return FetchedPage(url=url, content_type=content_type, body=bytes(body))


def clean_text(text: str) -> str:
    """Collapse every whitespace run to one space and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def extract_text(html: str) -> str:
    """Readable text of an HTML document, preferring its main content regions."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    parts: list[str] = []
    for selector in CONTENT_SELECTORS:
        for element in soup.select(selector):
            cleaned = clean_text(element.get_text(" "))
            if len(cleaned) > MIN_REGION_CHARS:
                parts.append(cleaned)
        if parts:
            break

    if not parts:
        body = soup.body or soup
        parts.append(clean_text(body.get_text(" ")))

    if soup.title is not None:
        title = clean_text(soup.title.get_text())
        if title:
            parts.insert(0, f"Title: {title}\n")

    return "\n\n".join(parts)


def format_fetch_result(url: str, content_type: str, text: str, max_chars: int = MAX_OUTPUT_CHARS) -> str:
    if len(text) > max_chars:
        body = f"{text[:max_chars]}\n\n[Content truncated at {max_chars} characters]"
    else:
        body = text
    return (
        f"[Tool Result: fetch]\nURL: {url}\nContent-Type: {content_type}\n"
        f"Length: {len(text)} characters\n\n{body}\n[End Tool Result]"
    )


def format_fetch_error(url: str, error: str) -> str:
    return f"[Tool Result: fetch]\nURL: {url}\nError: {error}\n[End Tool Result]"
