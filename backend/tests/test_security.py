"""
NoteKeeper Backend: Security Utility Tests
===========================================
"""

from datetime import timedelta

import jwt
import pytest

from notekeeper.exceptions import AuthenticationError
from notekeeper.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_is_salted(self):
        first = hash_password("sekret")
        second = hash_password("sekret")

        assert first != second
        assert verify_password("sekret", first)
        assert verify_password("sekret", second)

    def test_wrong_password_does_not_verify(self):
        assert not verify_password("wrong", hash_password("sekret"))

    def test_rounds_follow_settings(self):
        # conftest sets BCRYPT_ROUNDS=4
        assert hash_password("sekret").startswith("$2b$04$")

    def test_garbage_hash_does_not_verify(self):
        assert verify_password("sekret", "not-a-bcrypt-hash") is False


class TestAccessTokens:

    def test_claims_round_trip(self):
        token = create_access_token({"sub": "root", "id": "abc"})

        claims = decode_access_token(token)

        assert claims["sub"] == "root"
        assert claims["id"] == "abc"
        assert "exp" in claims

    def test_expired_token_is_rejected(self):
        token = create_access_token({"sub": "root"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(AuthenticationError, match="expired"):
            decode_access_token(token)

    def test_foreign_signature_is_rejected(self):
        token = jwt.encode({"sub": "root"}, "some-other-secret", algorithm="HS256")

        with pytest.raises(AuthenticationError, match="invalid"):
            decode_access_token(token)
