"""JWT login and auth dependencies (get_user_service, get_current_user, require_admin)."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import (
    PasswordHasher,
    create_access_token,
    decode_access_token,
    get_password_hasher,
)
from app.models.role import ROLE_ADMIN, ROLE_USER
from app.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from app.services.errors import UserNotFoundError
from app.services.user_service import UserService

router = APIRouter()
security = HTTPBearer(auto_error=False)

# Principal used when AUTH_ENABLED is False (local development only).
DEV_PRINCIPAL = CurrentUser(username="dev", authorities=[ROLE_ADMIN, ROLE_USER])


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    """Dependency: account service bound to the request's session."""
    return UserService(db, hasher)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("", response_model=TokenResponse)
def login(
    body: LoginRequest,
    service: Annotated[UserService, Depends(get_user_service)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        principal = service.load_for_authentication(body.username)
    except UserNotFoundError:
        raise _unauthorized("Invalid username or password.")
    if not hasher.verify(body.password, principal.password_hash):
        raise _unauthorized("Invalid username or password.")
    token = create_access_token(sub=principal.username, authorities=list(principal.authorities))
    return TokenResponse(access_token=token, token_type="bearer")


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if not settings.AUTH_ENABLED:
        return DEV_PRINCIPAL
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise _unauthorized("Invalid token payload")
    # Roles are re-read so a demotion takes effect before the token expires.
    try:
        principal = service.load_for_authentication(sub)
    except UserNotFoundError:
        raise _unauthorized("User not found")
    return CurrentUser(username=principal.username, authorities=sorted(principal.authorities))


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require an authenticated user holding ROLE_ADMIN. Raises 403 otherwise."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.get("/me", response_model=CurrentUser)
def read_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Return the authenticated principal (username and authorities)."""
    return current_user
