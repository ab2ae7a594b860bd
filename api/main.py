"""
api/main.py -- FastAPI application entry point for the GiftLink account service.

Run with:  uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for the configured browser origins
  2. log_requests   -- one access-log line per request with latency

Lifespan builds the collaborators once from Settings and hangs them on
app.state: the user store, the password hasher, the token issuer and the
AccountService that ties them together. Shutdown disposes the store's pool.

Error contract:
  Client errors (AuthError with a 4xx kind, and request validation failures)
  are 404 with a JSON body. Server errors are 500 with a plain-text body and
  no detail; the traceback goes to the log only.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import HealthResponse
from api.routes.auth import router as auth_router
from auth.errors import AuthError, ErrorKind
from auth.passwords import PasswordHasher
from auth.service import AccountService
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.config import get_settings

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("giftlink.api")

_settings = get_settings()
logging.getLogger().setLevel(_settings.log_level)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build request-independent collaborators on startup, release them on shutdown.

    Settings are read once here and passed explicitly; nothing downstream
    looks the secret or the database URL up on its own.
    """
    logger.info("GiftLink auth API starting up")
    store = UserStore(_settings.database_url)
    app.state.store = store
    app.state.accounts = AccountService(
        store=store,
        hasher=PasswordHasher(rounds=_settings.bcrypt_rounds),
        issuer=TokenIssuer(_settings.jwt_secret),
    )
    logger.info("User store initialized (bcrypt rounds=%d)", _settings.bcrypt_rounds)

    yield

    app.state.store.close()
    logger.info("GiftLink auth API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="GiftLink Auth API",
    description="Account registration, login and profile updates for GiftLink.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origin_list,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["Content-Type", "Authorization", "email"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    # An unhandled exception is turned into a 500 by the outermost middleware,
    # after this one has unwound; log that status here so the line is not lost.
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, tags=["Auth"])


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


def _internal_error() -> PlainTextResponse:
    return PlainTextResponse("Internal server error", status_code=500)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> Response:
    """Map an ErrorKind to its status and body.

    The service has already logged the failure; this only shapes the response.
    """
    if not exc.kind.is_client_error:
        return _internal_error()
    if exc.kind is ErrorKind.VALIDATION:
        return JSONResponse(status_code=exc.status_code, content={"errors": exc.errors})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.kind.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    """Body or header validation failed before the handler ran.

    Reported the same way as every other client error on these routes: 404,
    with the field errors listed under "errors".
    """
    errors = jsonable_encoder(exc.errors())
    logger.error("Validation error(s) in %s %s: %s", request.method, request.url.path, errors)
    return await auth_error_handler(request, AuthError(ErrorKind.VALIDATION, errors=errors))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in the same {"error": "<message>"} shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Catch-all for unexpected server errors.

    The raw exception goes to the log only, never into the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _internal_error()


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version and whether the user store answers."""
    db_ok = request.app.state.store.ping()
    return HealthResponse(
        version=__version__,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )
