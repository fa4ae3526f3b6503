"""Pydantic request/response schemas."""

from app.schemas.auth import AuthPrincipal, CurrentUser, LoginRequest, TokenResponse
from app.schemas.health import HealthResponse
from app.schemas.users import (
    UserCreate,
    UserRead,
    UserRef,
    UsersListResponse,
    UserUpdate,
    UserUpdateBody,
)

__all__ = [
    "AuthPrincipal",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "TokenResponse",
    "UserCreate",
    "UserRead",
    "UserRef",
    "UserUpdate",
    "UserUpdateBody",
    "UsersListResponse",
]
