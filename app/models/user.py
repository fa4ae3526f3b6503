"""ORM model for admin panel user accounts."""

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base
from app.models.role import ROLE_ADMIN, Role, users_roles


class User(Base):
    """
    User account with bcrypt password digest and a set of roles.

    is_admin mirrors membership of ROLE_ADMIN in roles; the account service
    updates both together, the database does not derive one from the other.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    age = Column(Integer, nullable=False, default=0)
    is_admin = Column(Boolean, nullable=False, default=False)

    roles = relationship(Role, secondary=users_roles, collection_class=set, lazy="selectin")

    @property
    def authorities(self) -> frozenset[str]:
        """Role names granted to this user."""
        return frozenset(role.name for role in self.roles)

    def add_role(self, role: Role) -> None:
        self.roles.add(role)

    def remove_role(self, role: Role) -> None:
        self.roles.discard(role)

    def set_admin(self, admin_role: Role, is_admin: bool) -> None:
        """Grant or revoke the admin role and keep is_admin in sync with it."""
        if admin_role.name != ROLE_ADMIN:
            raise ValueError(f"expected {ROLE_ADMIN}, got {admin_role.name}")
        if is_admin:
            self.add_role(admin_role)
        else:
            self.remove_role(admin_role)
        self.is_admin = is_admin

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, username={self.username!r}, is_admin={self.is_admin!r})"
