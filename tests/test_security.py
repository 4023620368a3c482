"""
Tests for password hashing and access tokens.
"""

from datetime import timedelta

import jwt
import pytest

from core.exceptions import UnauthorizedError
from core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_and_verify():
    hashed = hash_password("secret123", rounds=4)

    assert hashed != "secret123"
    assert hashed.startswith("$2")
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_rejects_non_hash_values():
    assert not verify_password("secret123", None)
    assert not verify_password("secret123", "")
    assert not verify_password("secret123", "secret123")


def test_long_passwords_truncate_at_72_bytes():
    base = "x" * 72
    hashed = hash_password(base + "tail", rounds=4)
    assert verify_password(base + "different", hashed)


def test_token_round_trip(test_settings):
    token = create_access_token("user-1", "admin", settings=test_settings)
    payload = decode_access_token(token, settings=test_settings)

    assert payload["sub"] == "user-1"
    assert payload["role"] == "admin"
    assert payload["exp"] - payload["iat"] == test_settings.jwt_expires_hours * 3600


def test_expired_token(test_settings):
    token = create_access_token(
        "user-1", "member", settings=test_settings, expires_delta=timedelta(seconds=-5)
    )
    with pytest.raises(UnauthorizedError) as exc_info:
        decode_access_token(token, settings=test_settings)
    assert exc_info.value.message == "Token expired"


def test_wrong_secret(test_settings):
    forged = jwt.encode(
        {"sub": "user-1", "role": "admin"},
        "another-secret-key-that-is-long-enough-000",
        algorithm="HS256",
    )
    with pytest.raises(UnauthorizedError) as exc_info:
        decode_access_token(forged, settings=test_settings)
    assert exc_info.value.message == "Invalid token"


def test_malformed_token(test_settings):
    with pytest.raises(UnauthorizedError) as exc_info:
        decode_access_token("not-a-token", settings=test_settings)
    assert exc_info.value.message == "Invalid token"


def test_token_without_subject(test_settings):
    token = jwt.encode(
        {"role": "admin"},
        test_settings.jwt_secret_key,
        algorithm=test_settings.jwt_algorithm,
    )
    with pytest.raises(UnauthorizedError) as exc_info:
        decode_access_token(token, settings=test_settings)
    assert exc_info.value.message == "Invalid token"
