"""
auth/errors.py -- Explicit error kinds for the account operations.

Every failure a handler step can produce is one ErrorKind member. Each kind
owns its HTTP status and default message, so the mapping from failure to
response is a table lookup rather than a chain of except clauses.

Client errors are all 404. That is the status the GiftLink frontend was built
against for duplicate email, bad credentials, unknown user and bad input, and
changing it would break existing clients.
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import Any


class ErrorKind(Enum):
    EMAIL_EXISTS = ("email_exists", HTTPStatus.NOT_FOUND, "Email already exists")
    USER_NOT_FOUND = ("user_not_found", HTTPStatus.NOT_FOUND, "User does not exist")
    WRONG_PASSWORD = ("wrong_password", HTTPStatus.NOT_FOUND, "Wrong password")
    MISSING_EMAIL_HEADER = (
        "missing_email_header",
        HTTPStatus.NOT_FOUND,
        "Email not found in request headers",
    )
    VALIDATION = ("validation_error", HTTPStatus.NOT_FOUND, "Request validation failed")
    STORE_UNAVAILABLE = ("store_unavailable", HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")
    INTERNAL = ("internal_error", HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")

    def __init__(self, code: str, status: HTTPStatus, message: str) -> None:
        self.code = code
        self.status = status
        self.message = message

    @property
    def is_client_error(self) -> bool:
        return self.status < HTTPStatus.INTERNAL_SERVER_ERROR


class AuthError(Exception):
    """Raised by AccountService when an operation cannot complete.

    kind decides the response; errors carries field-level detail for
    VALIDATION failures and is empty otherwise.
    """

    def __init__(self, kind: ErrorKind, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(kind.message)
        self.kind = kind
        self.errors = errors or []

    @property
    def status_code(self) -> int:
        return int(self.kind.status)
