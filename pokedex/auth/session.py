"""
Session gate: credential check plus signed, time-limited session tokens.

Tokens are HS256 JWTs carrying ``sub``, ``iat`` and ``exp``. Nothing is
stored server side; a token is valid until it expires or the client
drops it. Verification fails closed: anything wrong with a token makes
``verify_token`` return ``None``, exactly as if no token was sent.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from jose import jwt
from jose.exceptions import JOSEError

from ..errors import InvalidCredentials, InvalidInput
from .credentials import CredentialStore
from .schemas import Session

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=7)
MIN_PASSWORD_LENGTH = 3


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_login_input(username: Optional[str], password: Optional[str]) -> Tuple[str, str]:
    """Check the login form before any credential lookup.

    Returns the trimmed username and the password unchanged. Raises
    ``InvalidInput`` when either field is blank or the password is too
    short.
    """
    if not username or not username.strip():
        raise InvalidInput("Username is required")
    if not password or not password.strip():
        raise InvalidInput("Password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return username.strip(), password


class SessionGate:
    def __init__(
        self,
        store: CredentialStore,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl
        self._clock = clock

    def authenticate(self, username: Optional[str], password: Optional[str]) -> bool:
        """Return whether the pair matches the credential store.

        Malformed input raises ``InvalidInput`` instead of returning
        ``False`` so callers can tell a bad form from bad credentials.
        """
        username, password = validate_login_input(username, password)
        return self.store.validate(username, password)

    def login(self, username: Optional[str], password: Optional[str]) -> str:
        """Authenticate and return a fresh token for the user."""
        if not self.authenticate(username, password):
            logger.info("Rejected login for %r", username)
            raise InvalidCredentials()
        subject = (username or "").strip()
        logger.info("User %r logged in", subject)
        return self.issue_token(subject)

    def issue_token(self, subject: str) -> str:
        issued_at = self._clock()
        claims = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify_token(self, token: Optional[str]) -> Optional[Session]:
        if not token:
            return None
        try:
            # Expiry is checked below against our own clock.
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
            )
            subject = claims["sub"]
            issued_at = datetime.fromtimestamp(int(claims["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
        except (JOSEError, KeyError, TypeError, ValueError, OverflowError) as exc:
            logger.debug("Token verification failed: %s", exc)
            return None

        if not isinstance(subject, str) or not subject:
            return None
        if self._clock() > expires_at:
            logger.debug("Token for %r expired at %s", subject, expires_at.isoformat())
            return None
        return Session(subject=subject, issued_at=issued_at, expires_at=expires_at)
