"""Session bootstrap: hands out new session ids."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.ferret.config import SESSION_COOKIE_NAME
from src.ferret.session_store import SessionStore

from .deps import get_store

router = APIRouter(tags=["session"])


@router.api_route("/session", methods=["GET", "POST"])
async def create_session(store: SessionStore = Depends(get_store)) -> JSONResponse:
    """Provision a new session and set it as an http-only cookie."""
    session = store.create()
    response = JSONResponse({"session_id": str(session.id)})
    response.set_cookie(
        SESSION_COOKIE_NAME,
        str(session.id),
        path="/",
        httponly=True,
        samesite="strict",
    )
    return response
