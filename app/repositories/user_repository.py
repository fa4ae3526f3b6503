"""SQLAlchemy repository for User records."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Find, save and delete users within the caller's session (no commits here)."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_id(self, user_id: int) -> User | None:
        return self._session.get(User, user_id)

    def find_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return self._session.scalars(stmt).one_or_none()

    def find_all(self) -> list[User]:
        stmt = select(User).order_by(User.id)
        return list(self._session.scalars(stmt))

    def save(self, user: User) -> User:
        """Insert or update; flushes so a new user gets its id."""
        self._session.add(user)
        self._session.flush()
        logger.debug("Saved user: id=%s username=%s", user.id, user.username)
        return user

    def delete(self, user: User) -> None:
        self._session.delete(user)
        self._session.flush()
        logger.debug("Deleted user: id=%s", user.id)
