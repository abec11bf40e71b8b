"""Authentication request/response schemas"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=1024)


class LoginResponse(CamelModel):
    token: str
    expires_at: datetime
    username: str
    role: str


class LogoutResponse(CamelModel):
    message: str


class ValidateResponse(CamelModel):
    is_valid: bool
    username: Optional[str] = None
    message: str
    reason: str
