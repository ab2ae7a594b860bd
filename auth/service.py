"""
auth/service.py -- Register, login and profile-update orchestration.

AccountService owns the credential flow: store lookups, password hashing and
token issuance. It knows nothing about HTTP. Every failure leaves as an
AuthError whose ErrorKind decides the response status, so routes stay thin.

Failure mapping:
  sqlalchemy SQLAlchemyError   -> STORE_UNAVAILABLE (500)
  IntegrityError on insert     -> EMAIL_EXISTS (404), the concurrent-register case
  bcrypt ValueError on hash    -> INTERNAL (500)
  jose JWTError on sign        -> INTERNAL (500)

Nothing is rolled back. If signing fails after a successful insert the new
record stays in the store and the client gets a 500; registering again
returns EMAIL_EXISTS and the user can log in instead.

Logging: every client error is logged at ERROR before raising, every server
error with its traceback, every success at INFO once the work is done.
Passwords and tokens are never logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from jose import JWTError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.errors import AuthError, ErrorKind
from auth.models import User
from auth.passwords import PasswordHasher
from auth.store import UserStore, now_iso
from auth.tokens import TokenIssuer

logger = logging.getLogger("giftlink.auth")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RegisterResult:
    token: str
    email: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    user_name: str
    user_email: str


@dataclass(frozen=True)
class UpdateResult:
    token: str


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AccountService:
    """Credential flow for the three account operations.

    Collaborators are passed in; the app lifespan builds them once from
    Settings and tests build them against an in-memory store.
    """

    def __init__(self, store: UserStore, hasher: PasswordHasher, issuer: TokenIssuer) -> None:
        self.store = store
        self.hasher = hasher
        self.issuer = issuer

    def register(self, email: str, password: str, first_name: str, last_name: str) -> RegisterResult:
        if self._find(email) is not None:
            logger.error("Email already exists")
            raise AuthError(ErrorKind.EMAIL_EXISTS)

        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=self._hash(password),
            created_at=now_iso(),
        )
        try:
            user_id = self.store.create_user(user)
        except IntegrityError:
            # Another request inserted the same email between our lookup and insert.
            logger.error("Email already exists (lost registration race)")
            raise AuthError(ErrorKind.EMAIL_EXISTS) from None
        except SQLAlchemyError as exc:
            logger.exception("User store insert failed")
            raise AuthError(ErrorKind.STORE_UNAVAILABLE) from exc

        token = self._issue(user_id)
        logger.info("User registered successfully (id=%s)", user_id)
        return RegisterResult(token=token, email=email)

    def login(self, email: str, password: str) -> LoginResult:
        user = self._find(email)
        if user is None:
            logger.error("User does not exist")
            raise AuthError(ErrorKind.USER_NOT_FOUND)

        if not self.hasher.verify(password, user.password_hash):
            logger.error("Password does not match")
            raise AuthError(ErrorKind.WRONG_PASSWORD)

        token = self._issue(user.id)
        logger.info("User logged in successfully (id=%s)", user.id)
        return LoginResult(token=token, user_name=user.first_name, user_email=user.email)

    def update_profile(self, email: str | None, name: str) -> UpdateResult:
        """Set the display (first) name of the account identified by email.

        email comes from a request header and may be missing; that is a client
        error regardless of what the body holds.
        """
        if not email:
            logger.error("Email not found in request headers")
            raise AuthError(ErrorKind.MISSING_EMAIL_HEADER)

        user = self._find(email)
        if user is None:
            logger.error("User does not exist")
            raise AuthError(ErrorKind.USER_NOT_FOUND)

        user.first_name = name
        user.updated_at = now_iso()
        try:
            replaced = self.store.replace_user(user)
        except SQLAlchemyError as exc:
            logger.exception("User store update failed")
            raise AuthError(ErrorKind.STORE_UNAVAILABLE) from exc
        if not replaced:
            # Row vanished between lookup and write.
            logger.error("User does not exist")
            raise AuthError(ErrorKind.USER_NOT_FOUND)

        token = self._issue(user.id)
        logger.info("User details successfully updated (id=%s)", user.id)
        return UpdateResult(token=token)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _find(self, email: str) -> User | None:
        try:
            return self.store.get_by_email(email)
        except SQLAlchemyError as exc:
            logger.exception("User store lookup failed")
            raise AuthError(ErrorKind.STORE_UNAVAILABLE) from exc

    def _hash(self, password: str) -> str:
        try:
            return self.hasher.hash(password)
        except ValueError as exc:
            logger.exception("Password hashing failed")
            raise AuthError(ErrorKind.INTERNAL) from exc

    def _issue(self, user_id: int | None) -> str:
        try:
            return self.issuer.issue(user_id)
        except JWTError as exc:
            logger.exception("Token signing failed")
            raise AuthError(ErrorKind.INTERNAL) from exc
