"""
Admin panel user management: list, create, update, delete, promote/demote.

Users are addressed by username, except PUT /users/{user_id}: an update may
rename the user, so it is keyed by the immutable id.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.v1.auth import get_user_service, require_admin
from app.schemas.auth import CurrentUser
from app.schemas.users import (
    UserCreate,
    UserRead,
    UserRef,
    UsersListResponse,
    UserUpdate,
    UserUpdateBody,
)
from app.services.errors import (
    AccountError,
    UsernameConflictError,
    UserNotFoundError,
)
from app.services.user_service import UserService

router = APIRouter()

Service = Annotated[UserService, Depends(get_user_service)]
Admin = Annotated[CurrentUser, Depends(require_admin)]


def _to_http(e: AccountError) -> HTTPException:
    if isinstance(e, UserNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, UsernameConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    # RoleNotFoundError: the request named a role that was never seeded
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)


@router.get("", response_model=UsersListResponse)
def list_users(_admin: Admin, service: Service) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=[UserRead.model_validate(u) for u in service.list_all()])


@router.get("/{username}", response_model=UserRead)
def get_user(username: str, _admin: Admin, service: Service) -> UserRead:
    try:
        return UserRead.model_validate(service.find_by_username(username))
    except AccountError as e:
        raise _to_http(e) from e


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, _admin: Admin, service: Service) -> UserRead:
    """
    Create a user with ROLE_USER (and ROLE_ADMIN when is_admin is set).

    An existing user with the same username is replaced.
    """
    try:
        return UserRead.model_validate(service.add(body))
    except AccountError as e:
        raise _to_http(e) from e


@router.put("/{user_id}", response_model=UserRead)
def update_user(user_id: int, body: UserUpdateBody, _admin: Admin, service: Service) -> UserRead:
    """
    Replace every field of the user with this id (not username, since the body
    may rename it). The password is hashed from the plaintext given.
    """
    try:
        user = service.update(UserUpdate(id=user_id, **body.model_dump()))
    except AccountError as e:
        raise _to_http(e) from e
    return UserRead.model_validate(user)


@router.delete("/{username}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(username: str, _admin: Admin, service: Service) -> Response:
    """Delete a user; deleting an unknown username succeeds."""
    service.delete(UserRef(username=username))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{username}/admin", response_model=UserRead)
def grant_admin(username: str, _admin: Admin, service: Service) -> UserRead:
    try:
        return UserRead.model_validate(service.make_admin(UserRef(username=username)))
    except AccountError as e:
        raise _to_http(e) from e


@router.delete("/{username}/admin", response_model=UserRead)
def revoke_admin(username: str, _admin: Admin, service: Service) -> UserRead:
    try:
        return UserRead.model_validate(service.unmake_admin(UserRef(username=username)))
    except AccountError as e:
        raise _to_http(e) from e
