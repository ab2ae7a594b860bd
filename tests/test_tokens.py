"""
tests/test_tokens.py -- Unit tests for auth.tokens.TokenIssuer.

Coverage:
  - Payload shape: {"user": {"id": "<str>"}, "iat": int}, no "exp"
  - Integer and string ids produce the same claim
  - A token signed with one secret does not verify under another
  - Empty secret is refused at construction
"""

from __future__ import annotations

import pytest
from jose import JWTError, jwt

from auth.tokens import TokenIssuer

SECRET = "unit-test-secret-0123456789abcdef0123456789"


class TestTokenIssuer:
    def test_payload_carries_nested_string_user_id(self) -> None:
        issuer = TokenIssuer(SECRET)
        payload = issuer.decode(issuer.issue(42))
        assert payload["user"] == {"id": "42"}
        assert isinstance(payload["iat"], int)

    def test_no_expiry_claim(self) -> None:
        issuer = TokenIssuer(SECRET)
        payload = issuer.decode(issuer.issue(1))
        assert "exp" not in payload

    def test_int_and_str_ids_normalize_to_same_claim(self) -> None:
        issuer = TokenIssuer(SECRET)
        from_int = issuer.decode(issuer.issue(7))
        from_str = issuer.decode(issuer.issue("7"))
        assert from_int["user"]["id"] == from_str["user"]["id"] == "7"

    def test_hs256_signed(self) -> None:
        token = TokenIssuer(SECRET).issue(3)
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_wrong_secret_fails_verification(self) -> None:
        token = TokenIssuer(SECRET).issue(3)
        other = TokenIssuer("another-secret-0123456789abcdef0123456789")
        with pytest.raises(JWTError):
            other.decode(token)

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenIssuer("")
