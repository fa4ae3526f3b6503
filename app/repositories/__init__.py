"""Persistence access for users and roles."""

from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository

__all__ = ["RoleRepository", "UserRepository"]
