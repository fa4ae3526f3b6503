"""Schemas for the user management endpoints and account service inputs."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserCreate(BaseModel):
    """New account. password is plaintext; roles are assigned by the service from is_admin."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128, description="Plaintext password")
    age: int = Field(default=0, ge=0)
    is_admin: bool = False


class UserUpdate(BaseModel):
    """
    Full replacement of an existing account.

    password must be plaintext: it is hashed on every update, so passing a
    stored digest back would hash the digest.
    """

    id: int
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128, description="Plaintext password")
    age: int = Field(default=0, ge=0)
    is_admin: bool = False
    roles: list[str] = Field(default_factory=list, description="Role names, e.g. ROLE_USER")


class UserUpdateBody(BaseModel):
    """PUT body; the id comes from the path."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    age: int = Field(default=0, ge=0)
    is_admin: bool = False
    roles: list[str] = Field(default_factory=list)


class UserRef(BaseModel):
    """Reference to an existing account by username."""

    username: str = Field(..., min_length=1, max_length=255)


class UserRead(BaseModel):
    """User entry for the admin panel (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    age: int
    is_admin: bool
    roles: list[str]

    @field_validator("roles", mode="before")
    @classmethod
    def role_names(cls, v: object) -> object:
        # ORM objects carry a set of Role rows
        if isinstance(v, (set, frozenset, list, tuple)):
            return sorted(getattr(r, "name", r) for r in v)
        return v


class UsersListResponse(BaseModel):
    users: list[UserRead]
