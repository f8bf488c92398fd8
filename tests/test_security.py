"""
Tests for token issuing, token verification and password hashing
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from taskhub.core.exceptions import UnauthorizedError
from taskhub.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)


def test_access_token_round_trip_returns_subject():
    user_id = uuid4()
    token = create_access_token(subject=user_id)

    assert verify_token(token) == str(user_id)


def test_expired_token_is_rejected():
    token = create_access_token(subject=uuid4(), expires_delta=timedelta(minutes=-5))

    with pytest.raises(UnauthorizedError, match="Token invalid or expired"):
        verify_token(token)


def test_wrong_token_type_is_rejected():
    token = create_access_token(subject=uuid4(), additional_claims={"type": "refresh"})

    with pytest.raises(UnauthorizedError):
        verify_token(token, token_type="access")


def test_tampered_token_is_rejected():
    token = create_access_token(subject=uuid4())
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    with pytest.raises(UnauthorizedError):
        verify_token(tampered)


def test_garbage_token_is_rejected():
    with pytest.raises(UnauthorizedError):
        verify_token("not-a-jwt")


def test_unauthorized_error_carries_bearer_challenge():
    exc = UnauthorizedError()

    assert exc.status_code == 401
    assert exc.headers == {"WWW-Authenticate": "Bearer"}


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = get_password_hash("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong-password", hashed)

    def test_account_without_password_never_matches(self):
        assert not verify_password("anything", None)
        assert not verify_password("anything", "")
