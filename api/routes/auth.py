"""
api/routes/auth.py -- Account REST endpoints.

Routes:
  POST /register   -- create an account; returns a bearer token
  POST /login      -- password login; returns a bearer token and the first name
  PUT  /update     -- change the display name of the account named in the
                      `email` header; returns a fresh bearer token

All three are public: there is no token-verification dependency in front of
them. The token returned is for the client to present to other services.

Error mapping lives in api/main.py. Handlers here only translate between the
transport models in api/models.py and AccountService; any AuthError raised by
the service propagates to the registered exception handler.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header, Request

from api.models import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UpdateRequest,
    UpdateResponse,
)
from auth.service import AccountService

router = APIRouter()


def _accounts(request: Request) -> AccountService:
    return request.app.state.accounts


# Plain `def` handlers: the store, bcrypt and signing are all blocking calls,
# so FastAPI runs these in its threadpool rather than on the event loop.


@router.post("/register", response_model=RegisterResponse)
def register(request: Request, body: RegisterRequest) -> RegisterResponse:
    """Create an account and return a token for it.

    404 if the email is already registered (pre-check or unique constraint).
    """
    result = _accounts(request).register(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return RegisterResponse(authtoken=result.token, email=result.email)


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> LoginResponse:
    """Check a password and return a token, the first name and the email.

    Unknown email and wrong password are both 404; only the message differs.
    """
    result = _accounts(request).login(email=body.email, password=body.password)
    return LoginResponse(
        authtoken=result.token,
        user_name=result.user_name,
        user_email=result.user_email,
    )


@router.put("/update", response_model=UpdateResponse)
def update(
    request: Request,
    body: UpdateRequest,
    email: Optional[str] = Header(default=None),
) -> UpdateResponse:
    """Set the first name of the account named by the `email` header."""
    result = _accounts(request).update_profile(email=email, name=body.name)
    return UpdateResponse(authtoken=result.token)
