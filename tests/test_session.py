"""Tests for the credential check and session tokens."""

from datetime import timedelta

import pytest
from jose import jwt

from pokedex.auth.credentials import InMemoryCredentialStore
from pokedex.auth.session import SessionGate, validate_login_input
from pokedex.errors import InvalidCredentials, InvalidInput

from .conftest import NOW, TEST_SECRET


def test_authenticate_accepts_the_configured_pair(gate):
    assert gate.authenticate("admin", "admin") is True


def test_authenticate_rejects_wrong_password(gate):
    assert gate.authenticate("admin", "wrong") is False
    assert gate.authenticate("root", "admin") is False


@pytest.mark.parametrize(
    "username,password",
    [("", "admin"), ("   ", "admin"), ("admin", ""), ("admin", "   "), ("admin", "ab"), (None, "admin")],
)
def test_authenticate_rejects_malformed_input(gate, username, password):
    with pytest.raises(InvalidInput):
        gate.authenticate(username, password)


def test_username_is_trimmed_before_lookup(gate):
    assert validate_login_input("  admin ", "admin") == ("admin", "admin")
    assert gate.authenticate("  admin ", "admin") is True


def test_login_raises_distinct_errors(gate):
    with pytest.raises(InvalidCredentials):
        gate.login("admin", "nope")
    with pytest.raises(InvalidInput):
        gate.login("", "admin")


def test_credential_store_can_be_swapped(clock):
    class ApproveEveryone:
        def validate(self, username, password):
            return True

        def get_user(self, username):
            return None

    gate = SessionGate(ApproveEveryone(), secret=TEST_SECRET, clock=clock)
    assert gate.authenticate("someone", "whatever") is True


def test_store_get_user():
    store = InMemoryCredentialStore("ash", "pikachu")
    assert store.get_user("ash").username == "ash"
    assert store.get_user("misty") is None


def test_issued_token_verifies_with_seven_day_expiry(gate):
    token = gate.login("admin", "admin")
    session = gate.verify_token(token)

    assert session is not None
    assert session.subject == "admin"
    assert session.issued_at == NOW
    assert session.expires_at == NOW + timedelta(days=7)


def test_token_is_valid_until_expiry_then_invalid(gate, clock):
    token = gate.issue_token("admin")

    clock.advance(timedelta(days=7))
    assert gate.verify_token(token) is not None

    clock.advance(timedelta(seconds=1))
    assert gate.verify_token(token) is None


def test_expired_token_with_valid_signature_is_invalid(gate):
    past = NOW - timedelta(days=30)
    token = jwt.encode(
        {"sub": "admin", "iat": int(past.timestamp()), "exp": int((past + timedelta(days=7)).timestamp())},
        TEST_SECRET,
        algorithm="HS256",
    )
    assert gate.verify_token(token) is None


def test_token_signed_with_another_secret_is_invalid(gate, clock):
    other = SessionGate(InMemoryCredentialStore(), secret="another-secret", clock=clock)
    assert gate.verify_token(other.issue_token("admin")) is None


def test_tampered_token_is_invalid(gate):
    header, payload, signature = gate.issue_token("admin").split(".")
    forged = jwt.encode({"sub": "mallory", "iat": 0, "exp": 4102444800}, "guess", algorithm="HS256")
    assert gate.verify_token(".".join([header, forged.split(".")[1], signature])) is None


@pytest.mark.parametrize("token", [None, "", "not-a-jwt-token", "a.b.c", "invalid.jwt.token"])
def test_malformed_tokens_are_invalid(gate, token):
    assert gate.verify_token(token) is None


def test_token_without_subject_is_invalid(gate):
    token = jwt.encode({"iat": int(NOW.timestamp()), "exp": int(NOW.timestamp()) + 60}, TEST_SECRET, algorithm="HS256")
    assert gate.verify_token(token) is None
