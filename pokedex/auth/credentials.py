"""
Credential stores used by the session gate.

The gate only talks to the ``CredentialStore`` protocol, so the single
hard-coded account below can be replaced by a database or an identity
provider without touching the gate or the routes.
"""

from __future__ import annotations

import hmac
from typing import Optional, Protocol

from .schemas import User


class CredentialStore(Protocol):
    def validate(self, username: str, password: str) -> bool: ...

    def get_user(self, username: str) -> Optional[User]: ...


class InMemoryCredentialStore:
    """Holds exactly one username/password pair."""

    def __init__(self, username: str = "admin", password: str = "admin") -> None:
        self._username = username
        self._password = password

    def validate(self, username: str, password: str) -> bool:
        # Both comparisons always run so timing does not reveal which one failed.
        user_ok = hmac.compare_digest(username.encode("utf-8"), self._username.encode("utf-8"))
        password_ok = hmac.compare_digest(password.encode("utf-8"), self._password.encode("utf-8"))
        return user_ok and password_ok

    def get_user(self, username: str) -> Optional[User]:
        if username == self._username:
            return User(username=self._username)
        return None
