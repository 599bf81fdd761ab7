"""Tests for JWT helpers and password hashing."""

from datetime import timedelta

import pytest

from transparency_portal.infrastructure.security.jwt import (
    create_access_token,
    verify_token,
)
from transparency_portal.infrastructure.security.password import (
    get_password_hash,
    verify_password,
)


def test_token_round_trip_keeps_subject_and_claims() -> None:
    token = create_access_token(7, extra_claims={"username": "admin"})
    payload = verify_token(token)
    assert payload["sub"] == "7"
    assert payload["username"] == "admin"


def test_expired_token_is_rejected() -> None:
    token = create_access_token(7, expires_delta=timedelta(seconds=-1))
    with pytest.raises(ValueError):
        verify_token(token)


def test_tampered_token_is_rejected() -> None:
    header, payload, _ = create_access_token(7).split(".")
    with pytest.raises(ValueError):
        verify_token(f"{header}.{payload}.{'A' * 43}")


def test_password_hash_verifies() -> None:
    hashed = get_password_hash("correct horse battery staple")
    assert hashed != "correct horse battery staple"
    assert verify_password("correct horse battery staple", hashed)
    assert not verify_password("wrong", hashed)


def test_long_passwords_are_not_truncated() -> None:
    """bcrypt alone ignores bytes past 72; the prehash keeps them significant."""
    base = "x" * 80
    hashed = get_password_hash(base + "a")
    assert not verify_password(base + "b", hashed)
