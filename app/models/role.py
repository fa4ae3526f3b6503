"""ORM model for roles (named permission groups) and the user/role link table."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table

from app.models.base import Base

ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"

# Reference data seeded by migration; never created by the account service.
ROLE_NAMES = (ROLE_USER, ROLE_ADMIN)

users_roles = Table(
    "users_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Named permission group, e.g. ROLE_USER or ROLE_ADMIN."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"Role(name={self.name!r})"
