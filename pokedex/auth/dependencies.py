"""
FastAPI dependencies that hand the per-process collaborators to routes.

``create_app`` stores the catalogue source, the session gate and the
settings on ``app.state``; routes obtain them through the functions
below instead of importing module-level instances.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from ..catalog.pokeapi_service import CatalogSource
from ..config import Settings
from ..errors import Unauthenticated
from .schemas import Session
from .session import SessionGate


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gate(request: Request) -> SessionGate:
    return request.app.state.gate


def get_source(request: Request) -> CatalogSource:
    return request.app.state.source


def extract_token(request: Request, cookie_name: str) -> Optional[str]:
    """Read the session token from a Bearer header, else from the cookie."""
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(cookie_name)


def require_session(
    request: Request,
    gate: SessionGate = Depends(get_gate),
    settings: Settings = Depends(get_settings),
) -> Session:
    """Resolve the caller's session or answer 401.

    A missing token and a token that fails verification get the same
    response.
    """
    session = gate.verify_token(extract_token(request, settings.auth_cookie_name))
    if session is None:
        raise Unauthenticated()
    return session
