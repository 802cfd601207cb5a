"""Run the FastAPI app for the Ferret research assistant."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from datetime import timedelta

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from main_config import Settings
from src.ferret.config import SESSION_PRUNE_INTERVAL_SECS
from src.ferret.errors import ValidationError
from src.ferret.providers import LLMProvider, OllamaProvider
from src.ferret.session_store import SessionStore
from src.ferret.tools import BraveSearchClient, PageFetcher, ToolExecutor, build_default_executor
from src.routers import chat_router, health_router, session_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _prune_sessions(store: SessionStore, timeout: timedelta) -> None:
    while True:
        await asyncio.sleep(SESSION_PRUNE_INTERVAL_SECS)
        store.prune_idle(timeout)


def create_app(
    settings: Settings | None = None,
    *,
    store: SessionStore | None = None,
    tools: ToolExecutor | None = None,
    llm_provider: LLMProvider | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        logger.info("Starting Ferret with configuration:")
        logger.info("  Ollama URL: %s", settings.ollama_url)
        logger.info("  Ollama Model: %s", settings.ollama_model)
        logger.info("  Bind Address: %s", settings.bind_address)
        if not settings.brave_api_key:
            logger.warning("BRAVE_API_KEY is not set; web search will fail")
        pruner = asyncio.create_task(
            _prune_sessions(app.state.store, timedelta(minutes=settings.session_timeout_mins))
        )
        yield
        pruner.cancel()
        with suppress(asyncio.CancelledError):
            await pruner

    app = FastAPI(title="Ferret", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store or SessionStore()
    app.state.tools = tools or build_default_executor(
        BraveSearchClient(settings.brave_api_key), PageFetcher()
    )
    app.state.llm_provider = llm_provider or OllamaProvider(
        default_model=settings.ollama_model, base_url=settings.ollama_url
    )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    app.include_router(session_router)
    app.include_router(chat_router)
    app.include_router(health_router)
    return app


app = create_app()


if __name__ == "__main__":
    _settings = app.state.settings
    uvicorn.run(
        "main:app",
        host=_settings.host,
        port=_settings.port,
        reload=False,
    )
