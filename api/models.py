"""
API request and response models for the GiftLink account endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py, which own the
internal domain representation. Route handlers map between the two.

The frontend speaks camelCase (firstName, userName, ...). Fields are declared
snake_case with camelCase aliases; request models accept either spelling and
responses are serialized by alias.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

# bcrypt works on at most 72 bytes of UTF-8. bcrypt 4.x silently ignores the
# rest, bcrypt 5.x raises ValueError. The limit is checked on the encoded
# length so a multibyte password is a validation error, never a 500.
_PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > _PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {_PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
    return value


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)
    first_name: str = Field(alias="firstName", min_length=1, max_length=100)
    last_name: str = Field(alias="lastName", min_length=1, max_length=100)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class UpdateRequest(BaseModel):
    """Request body for PUT /update. The target email travels in the `email` header."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RegisterResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    authtoken: str
    email: str


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    authtoken: str
    user_name: str = Field(alias="userName")
    user_email: str = Field(alias="userEmail")


class UpdateResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    authtoken: str


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
