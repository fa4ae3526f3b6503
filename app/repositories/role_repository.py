"""Read-only lookup of reference roles by name."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.role import Role
from app.services.errors import RoleNotFoundError


class RoleRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_role(self, name: str) -> Role:
        """Return the role called name; raises RoleNotFoundError if it was never seeded."""
        role = self._session.scalars(select(Role).where(Role.name == name)).one_or_none()
        if role is None:
            raise RoleNotFoundError(name)
        return role

    def get_roles(self, names: list[str]) -> set[Role]:
        return {self.get_role(name) for name in names}
