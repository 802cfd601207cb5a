import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROMPTS_DIR = os.path.join(BASE_DIR, "prompts")
DEFAULT_SYSTEM_PROMPT_PATH = os.path.join(PROMPTS_DIR, "ferret_system_prompt.md")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


class Settings(BaseModel):
    """Process configuration read from the environment (and .env if present)."""

    ollama_url: str = Field(default="http://localhost:11434")
    ollama_model: str = Field(default="qwen2.5:7b")
    brave_api_key: str = Field(default="", description="Brave Search subscription token")
    bind_address: str = Field(default="0.0.0.0:3000")
    session_timeout_mins: int = Field(default=60)
    cancel_on_disconnect: bool = Field(
        default=False,
        description="Cancel the running chat loop when the SSE client goes away.",
    )
    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            ollama_url=os.getenv("OLLAMA_URL", "http://localhost:11434"),
            ollama_model=os.getenv("OLLAMA_MODEL", "qwen2.5:7b"),
            brave_api_key=os.getenv("BRAVE_API_KEY", ""),
            bind_address=os.getenv("BIND_ADDRESS", "0.0.0.0:3000"),
            session_timeout_mins=_env_int("SESSION_TIMEOUT_MINS", 60),
            cancel_on_disconnect=_env_bool("CANCEL_ON_DISCONNECT"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def host(self) -> str:
        return self.bind_address.rsplit(":", 1)[0]

    @property
    def port(self) -> int:
        return int(self.bind_address.rsplit(":", 1)[1])
