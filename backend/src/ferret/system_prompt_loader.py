"""Utilities for loading the default system prompt from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import DEFAULT_SYSTEM_PROMPT_PATH

logger = logging.getLogger(__name__)

FALLBACK_SYSTEM_PROMPT = (
    "You are Ferret, a research assistant. Request a web search with "
    "<search>query</search> or read a page with <fetch>url</fetch>; results will "
    "be added to the conversation. Cite sources as markdown links."
)

_cached_prompt: Optional[str] = None


def _read_file(path: Path) -> str:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        logger.warning("System prompt file %s not readable, using built-in prompt", path)
        return ""
    return text.strip()


def get_default_system_prompt() -> str:
    """Return the default system prompt text, cached after first read.

    Falls back to a short built-in prompt if the file is missing or empty.
    """
    global _cached_prompt
    if _cached_prompt is None:
        _cached_prompt = _read_file(DEFAULT_SYSTEM_PROMPT_PATH) or FALLBACK_SYSTEM_PROMPT
    return _cached_prompt
