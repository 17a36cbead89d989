"""
Route definitions for authentication.

Endpoints under /api:
- POST /login    : check credentials, return a token and set the session cookie
- POST /logout   : drop the session cookie
- GET  /session  : describe the caller's current session
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import Settings
from ..errors import InvalidCredentials, InvalidInput
from .dependencies import get_gate, get_settings, require_session
from .schemas import LoginFailure, LoginRequest, LoginResponse, Session
from .session import SessionGate

router = APIRouter(prefix="/api", tags=["auth"])

LOGIN_PATH = "/api/login"


def login_failure(status_code: int, reason: LoginFailure, message: str) -> JSONResponse:
    body = LoginResponse(ok=False, reason=reason, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.post("/login", response_model=LoginResponse)
def login(
    req: LoginRequest,
    gate: SessionGate = Depends(get_gate),
    settings: Settings = Depends(get_settings),
):
    try:
        token = gate.login(req.username, req.password)
    except InvalidInput as exc:
        return login_failure(exc.status_code, LoginFailure.INVALID_INPUT, exc.message)
    except InvalidCredentials as exc:
        return login_failure(exc.status_code, LoginFailure.INVALID_CREDENTIALS, exc.message)

    username = req.username.strip()
    body = LoginResponse(
        ok=True,
        token=token,
        user=gate.store.get_user(username),
        message="Login successful",
    )
    response = JSONResponse(content=body.model_dump(mode="json"))
    response.set_cookie(
        settings.auth_cookie_name,
        token,
        max_age=int(gate.ttl.total_seconds()),
        httponly=True,
        samesite="lax",
    )
    return response


@router.post("/logout")
def logout(settings: Settings = Depends(get_settings)):
    response = JSONResponse(content={"ok": True})
    response.delete_cookie(settings.auth_cookie_name)
    return response


@router.get("/session", response_model=Session)
def current_session(session: Session = Depends(require_session)) -> Session:
    return session
