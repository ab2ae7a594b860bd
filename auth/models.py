"""
auth/models.py -- Domain dataclasses for account entities.

Pattern: Data class (pure data container, zero logic). The store maps rows to
these; the service mutates them; routes never see them directly.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered GiftLink account.

    email is unique and matched case-sensitively exactly as stored.
    password_hash is always a bcrypt string, never the plaintext.
    id is None until the store assigns one on insert.
    """

    email: str
    first_name: str
    last_name: str
    password_hash: str
    id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None  # None until the first profile update
