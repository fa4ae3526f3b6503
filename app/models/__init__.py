"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.role import ROLE_ADMIN, ROLE_USER, Role, users_roles
from app.models.user import User

__all__ = ["Base", "ROLE_ADMIN", "ROLE_USER", "Role", "User", "users_roles"]
