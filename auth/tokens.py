"""
auth/tokens.py -- Bearer token issuance.

JWT: python-jose with HS256. The payload is {"user": {"id": "<id>"}, "iat": n}.
The user id is always a string so tokens from register, login and update for
the same account carry an identical claim.

No "exp" claim is set: a token stays valid until the signing secret changes.
There is no verification middleware in this service; decode() exists for
tests and operator tooling.

Trust boundary: anyone holding JWT_SECRET can mint tokens for any user id.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import time
from typing import Any

from jose import jwt

_ALGORITHM = "HS256"


class TokenIssuer:
    """Signs bearer tokens with the process-wide secret.

    Built once in the app lifespan from Settings.jwt_secret and shared across
    requests; it holds no mutable state.
    """

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("TokenIssuer requires a non-empty secret.")
        self._secret = secret

    def issue(self, user_id: int | str) -> str:
        payload = {
            "user": {"id": str(user_id)},
            "iat": int(time.time()),
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def decode(self, token: str) -> dict[str, Any]:
        """Verify the signature and return the payload.

        Raises jose.JWTError on a bad signature or malformed token.
        """
        return jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
