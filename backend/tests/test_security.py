"""Tests for password hashing and session tokens."""
from datetime import timedelta

import jwt
import pytest

from woundcare.core.config import settings
from woundcare.core.security import (
    InvalidToken,
    SessionContext,
    create_access_token,
    create_refresh_token,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)
from woundcare.models import User, UserRole


def _user(**overrides):
    fields = dict(id="u-1", email="nurse@clinic.com.br", name="Nurse Joy", role=UserRole.NURSE)
    fields.update(overrides)
    return User(**fields)


class TestPasswords:
    def test_hash_then_verify(self):
        hashed = hash_password("S3cure#Pass")
        assert hashed != "S3cure#Pass"
        assert verify_password("S3cure#Pass", hashed)

    def test_wrong_password_rejected(self):
        hashed = hash_password("S3cure#Pass")
        assert not verify_password("s3cure#pass", hashed)

    def test_empty_password_cannot_be_hashed(self):
        with pytest.raises(ValueError):
            hash_password("")

    def test_malformed_hash_is_false_not_error(self):
        assert verify_password("whatever", "not-a-bcrypt-hash") is False
        assert verify_password("whatever", "") is False


class TestTokens:
    def test_round_trip_returns_claims(self):
        token = issue_token({"user_id": "u-1", "role": "NURSE"}, timedelta(minutes=5))
        claims = verify_token(token)
        assert claims["user_id"] == "u-1"
        assert claims["role"] == "NURSE"
        assert claims["type"] == "access"

    def test_expired_token_rejected(self):
        token = issue_token({"user_id": "u-1"}, timedelta(seconds=-1))
        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_wrong_signature_rejected(self):
        forged = jwt.encode({"user_id": "u-1", "type": "access"}, "another-secret", algorithm="HS256")
        with pytest.raises(InvalidToken):
            verify_token(forged)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidToken):
            verify_token("not.a.jwt")
        with pytest.raises(InvalidToken):
            verify_token("")

    def test_refresh_token_is_not_an_access_token(self):
        refresh = create_refresh_token(_user())
        with pytest.raises(InvalidToken):
            verify_token(refresh)
        assert verify_token(refresh, expected_type="refresh")["user_id"] == "u-1"

    def test_refresh_tokens_are_unique(self):
        user = _user()
        assert create_refresh_token(user) != create_refresh_token(user)

    def test_access_token_carries_identity(self):
        claims = verify_token(create_access_token(_user()))
        session = SessionContext.from_claims(claims)
        assert session == SessionContext("u-1", "nurse@clinic.com.br", UserRole.NURSE, "Nurse Joy")

    def test_access_token_lifetime(self):
        claims = verify_token(create_access_token(_user()))
        assert claims["exp"] - claims["iat"] == settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 3600


class TestSessionContext:
    def test_missing_claim_is_invalid(self):
        with pytest.raises(InvalidToken):
            SessionContext.from_claims({"user_id": "u-1", "role": "ADMIN"})

    def test_can_follows_role(self):
        nurse = SessionContext("u-1", "n@clinic.com.br", UserRole.NURSE, "N")
        assert nurse.can("wound:create")
        assert not nurse.can("wound:delete")
