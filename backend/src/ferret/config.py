"""Orchestrator configuration: paths, limits and defaults."""

from __future__ import annotations

from pathlib import Path

from main_config import DEFAULT_SYSTEM_PROMPT_PATH as _DEFAULT_SYSTEM_PROMPT_PATH

DEFAULT_SYSTEM_PROMPT_PATH = Path(_DEFAULT_SYSTEM_PROMPT_PATH)

DEFAULT_MODEL = "qwen2.5:7b"
DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_MAX_TOOL_ITERATIONS = 5

# Search
BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
SEARCH_RESULT_COUNT = 10

# Fetch
SEARCH_TIMEOUT_SECS = 10.0
FETCH_TIMEOUT_SECS = 10.0
MAX_CONTENT_SIZE = 1_000_000  # bytes
MAX_OUTPUT_CHARS = 4000
FETCH_USER_AGENT = "Ferret/0.1 (Web research assistant)"

# Sessions
DEFAULT_SESSION_TIMEOUT_MINS = 60
SESSION_PRUNE_INTERVAL_SECS = 300
SESSION_COOKIE_NAME = "session_id"
