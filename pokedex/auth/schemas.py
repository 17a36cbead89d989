"""Pydantic models for the login and session endpoints."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    username: str


class Session(BaseModel):
    """A verified session, decoded from a signed token."""

    model_config = ConfigDict(frozen=True)

    subject: str
    issued_at: datetime
    expires_at: datetime


class LoginRequest(BaseModel):
    # Both fields may be missing; presence, emptiness and length are checked by the gate so
    # they map to ``invalid_input`` rather than a generic schema error.
    username: Optional[str] = None
    password: Optional[str] = None


class LoginFailure(str, Enum):
    INVALID_INPUT = "invalid_input"
    INVALID_CREDENTIALS = "invalid_credentials"


class LoginResponse(BaseModel):
    ok: bool
    token: Optional[str] = None
    user: Optional[User] = None
    reason: Optional[LoginFailure] = None
    message: str = ""
