"""
auth/passwords.py -- bcrypt password hashing.

Using bcrypt directly rather than passlib[bcrypt]: passlib's wrap-bug
detection builds a password longer than 72 bytes, which recent bcrypt
releases reject.

The cost factor comes from Settings.bcrypt_rounds (default 10, the work factor
existing GiftLink hashes were created with). bcrypt embeds the cost and salt in
the hash string, so changing the setting only affects new hashes; old ones keep
verifying.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10


class PasswordHasher:
    """Salt-and-hash plaintext passwords; verify plaintext against a stored hash."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of plain with a fresh random salt.

        bcrypt only uses the first 72 bytes of UTF-8: 4.x ignores the rest,
        5.x raises ValueError. The request models reject passwords over 72
        encoded bytes, so a ValueError here means a caller bypassed them.
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if plain matches hashed. A malformed hash counts as a mismatch."""
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False
