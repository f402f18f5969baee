"""
Authentication API request/response schemas.
Pydantic models for validation.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(BaseModel):
    """
    Request to register a new user.

    Fields are optional at the schema level so that a missing field is
    reported as invalid input naming the field.
    """

    model_config = _camel

    first_name: str | None = Field(None, description="Given name")
    last_name: str | None = Field(None, description="Family name")
    email: str | None = Field(None, description="Email address")
    password: str | None = Field(None, description="Password")


class LoginRequest(BaseModel):
    """Request to login with email and password."""

    email: str | None = Field(None, description="Email address")
    password: str | None = Field(None, description="Password")


class AuthResponse(BaseModel):
    """Response for register/login with a bearer token."""

    model_config = _camel

    user_id: str
    token: str
    message: str
