"""
Haulpay - Security Utility Tests

Password hashing and session token round-trips.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.config import settings
from app.utils.security import (
    SessionIdentity,
    create_access_token,
    decode_token,
    get_password_hash,
    verify_access_token,
    verify_password,
)


class TestPasswordHashing:
    """Test password hashing and verification."""

    def test_hash_is_bcrypt_and_salted(self):
        first = get_password_hash("testpassword")
        second = get_password_hash("testpassword")

        assert first.startswith("$2b$")
        assert first != second

    def test_verify_password(self):
        hashed = get_password_hash("correct_password")

        assert verify_password("correct_password", hashed) is True
        assert verify_password("wrong_password", hashed) is False


class TestSessionTokens:
    """Test JWT session token creation and verification."""

    def _token(self, **overrides):
        data = {"sub": "7", "email": "driver@haulpay.com", "role": "employee"}
        data.update(overrides)
        return create_access_token(data)

    def test_round_trip_returns_identity(self):
        identity = verify_access_token(self._token())

        assert identity == SessionIdentity(id=7, email="driver@haulpay.com", role="employee")
        assert identity.is_admin is False

    def test_admin_role_is_carried(self):
        identity = verify_access_token(self._token(role="admin"))
        assert identity.is_admin is True

    def test_token_expires_after_configured_hours(self):
        before = datetime.now(timezone.utc)
        payload = decode_token(self._token())

        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        expected = before + timedelta(hours=settings.access_token_expire_hours)
        assert abs((expires - expected).total_seconds()) < 5
        assert payload["type"] == "access"

    def test_expired_token_is_rejected(self):
        token = create_access_token(
            {"sub": "7", "email": "driver@haulpay.com", "role": "employee"},
            expires_delta=timedelta(seconds=-1),
        )
        assert verify_access_token(token) is None

    def test_wrong_signature_is_rejected(self):
        token = jwt.encode(
            {
                "sub": "7",
                "email": "driver@haulpay.com",
                "role": "admin",
                "type": "access",
                "exp": datetime.now(timezone.utc) + timedelta(hours=1),
            },
            "not-the-server-secret",
            algorithm=settings.jwt_algorithm,
        )
        assert verify_access_token(token) is None

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed_token_is_rejected(self, token):
        assert verify_access_token(token) is None

    def test_missing_claims_are_rejected(self):
        token = create_access_token({"sub": "7"})
        assert verify_access_token(token) is None

    def test_non_numeric_subject_is_rejected(self):
        assert verify_access_token(self._token(sub="abc")) is None

    def test_wrong_token_type_is_rejected(self):
        token = jwt.encode(
            {
                "sub": "7",
                "email": "driver@haulpay.com",
                "role": "employee",
                "type": "refresh",
                "exp": datetime.now(timezone.utc) + timedelta(hours=1),
            },
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        assert verify_access_token(token) is None
