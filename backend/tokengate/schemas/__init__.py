"""Pydantic schemas for request/response validation"""
from tokengate.schemas.auth import LoginRequest, LoginResponse, LogoutResponse, ValidateResponse
from tokengate.schemas.data import (
    AdminDataResponse,
    PublicInfoResponse,
    StatsResponse,
    UserInfoResponse,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "ValidateResponse",
    "UserInfoResponse",
    "AdminDataResponse",
    "StatsResponse",
    "PublicInfoResponse",
]
