"""
Error types shared by the catalogue and the session gate.

Each error knows the HTTP status it maps to and a short machine-readable
``reason`` so the application can render a uniform error envelope.
"""

from __future__ import annotations

from typing import Dict, Optional


class PokedexError(Exception):
    """Base class for every error the service reports to a client."""

    status_code: int = 500
    reason: str = "internal_error"
    default_message: str = "Internal server error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(PokedexError):
    """Caller-supplied data has the wrong shape or is out of range."""

    status_code = 400
    reason = "invalid_input"
    default_message = "Invalid input"


class InvalidCredentials(PokedexError):
    status_code = 401
    reason = "invalid_credentials"
    default_message = "Invalid credentials"


class NotFound(PokedexError):
    status_code = 404
    reason = "not_found"
    default_message = "Pokemon not found"


class UpstreamUnavailable(PokedexError):
    """The catalogue source failed or returned something unusable.

    Never retried internally; the client may try again.
    """

    status_code = 502
    reason = "upstream_unavailable"
    default_message = "Failed to fetch Pokemon data"


class Unauthenticated(PokedexError):
    """No session token, or one that failed verification."""

    status_code = 401
    reason = "unauthenticated"
    default_message = "Not authenticated"
    headers = {"WWW-Authenticate": "Bearer"}
