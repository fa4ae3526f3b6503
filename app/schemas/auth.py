"""Request/response schemas for auth endpoints and the authentication principal."""

from pydantic import BaseModel, ConfigDict, Field

from app.models.role import ROLE_ADMIN


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class AuthPrincipal(BaseModel):
    """Identity, credential digest and granted authorities used to verify a login."""

    model_config = ConfigDict(frozen=True)

    username: str
    password_hash: str = Field(repr=False)
    authorities: frozenset[str] = frozenset()


class CurrentUser(BaseModel):
    """Authenticated caller resolved from a bearer token."""

    username: str
    authorities: list[str]

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.authorities
