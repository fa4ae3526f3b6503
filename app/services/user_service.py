"""
User account service: authentication lookup and the account lifecycle.

Stateless; each mutating call is one unit of work on the injected session,
committed on success and rolled back on any error.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import PasswordHasher
from app.models.role import ROLE_ADMIN, ROLE_USER, Role
from app.models.user import User
from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository
from app.schemas.auth import AuthPrincipal
from app.schemas.users import UserCreate, UserRef, UserUpdate
from app.services.errors import UsernameConflictError, UserNotFoundError

logger = logging.getLogger(__name__)

# Baseline accounts: (username, age, is_admin)
SEED_ACCOUNTS = (
    ("Admin", 13, True),
    ("User", 11, False),
)
DEFAULT_SEED_PASSWORD = "123"


class UserService:
    """Account lifecycle over a user repository, role store and password hasher."""

    def __init__(
        self,
        session: Session,
        hasher: PasswordHasher,
        users: UserRepository | None = None,
        roles: RoleRepository | None = None,
    ) -> None:
        self._session = session
        self._hasher = hasher
        self._users = users if users is not None else UserRepository(session)
        self._roles = roles if roles is not None else RoleRepository(session)

    @contextmanager
    def _unit_of_work(self, username: str | None = None) -> Iterator[None]:
        try:
            yield
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            if username is None:
                raise
            # users.username unique index lost a race with a concurrent writer
            raise UsernameConflictError(username) from e
        except Exception:
            self._session.rollback()
            raise

    def _get_by_username(self, username: str) -> User:
        user = self._users.find_by_username(username)
        if user is None:
            raise UserNotFoundError(username=username)
        return user

    def _default_roles(self, is_admin: bool) -> set[Role]:
        names = [ROLE_USER, ROLE_ADMIN] if is_admin else [ROLE_USER]
        return self._roles.get_roles(names)

    def _purge(self, user: User) -> None:
        user.roles.clear()
        self._users.delete(user)

    # Read operations

    def load_for_authentication(self, username: str) -> AuthPrincipal:
        """Principal for login verification; raises UserNotFoundError if absent."""
        user = self._get_by_username(username)
        return AuthPrincipal(
            username=user.username,
            password_hash=user.password_hash,
            authorities=user.authorities,
        )

    def find_by_username(self, username: str) -> User:
        return self._get_by_username(username)

    def list_all(self) -> list[User]:
        return self._users.find_all()

    # Mutations

    def add(self, data: UserCreate) -> User:
        """
        Create an account from plaintext credentials.

        An existing account with the same username is deleted first and replaced,
        so a duplicate submission leaves exactly one record holding the new data.
        Roles are {ROLE_USER} or {ROLE_USER, ROLE_ADMIN} depending on is_admin.
        """
        with self._unit_of_work(data.username):
            existing = self._users.find_by_username(data.username)
            if existing is not None:
                logger.warning(
                    "Replacing existing user with duplicate username: id=%s username=%s",
                    existing.id,
                    existing.username,
                )
                self._purge(existing)
            user = User(
                username=data.username,
                password_hash=self._hasher.hash(data.password),
                age=data.age,
                is_admin=data.is_admin,
                roles=self._default_roles(data.is_admin),
            )
            self._users.save(user)
        logger.info("Created user: id=%s username=%s admin=%s", user.id, user.username, user.is_admin)
        return user

    def update(self, data: UserUpdate) -> User:
        """
        Overwrite username, age, password, roles and admin flag of user data.id.

        The password is always re-hashed from data.password. An empty role list
        falls back to the defaults used by add; ROLE_ADMIN is then granted or
        revoked to match is_admin.
        """
        with self._unit_of_work(data.username):
            user = self._users.find_by_id(data.id)
            if user is None:
                raise UserNotFoundError(user_id=data.id)
            if data.username != user.username:
                holder = self._users.find_by_username(data.username)
                if holder is not None and holder.id != user.id:
                    raise UsernameConflictError(data.username)
            roles = self._roles.get_roles(data.roles) if data.roles else self._default_roles(data.is_admin)
            user.username = data.username
            user.age = data.age
            user.password_hash = self._hasher.hash(data.password)
            user.roles = roles
            user.set_admin(self._roles.get_role(ROLE_ADMIN), data.is_admin)
            self._users.save(user)
        logger.info("Updated user: id=%s username=%s", user.id, user.username)
        return user

    def delete(self, ref: UserRef) -> None:
        """Delete by username; unknown usernames are a no-op."""
        with self._unit_of_work():
            user = self._users.find_by_username(ref.username)
            if user is None:
                logger.debug("Delete skipped, no such user: %s", ref.username)
                return
            user_id = user.id
            self._purge(user)
        logger.info("Deleted user: id=%s username=%s", user_id, ref.username)

    def make_admin(self, ref: UserRef) -> User:
        with self._unit_of_work():
            user = self._get_by_username(ref.username)
            user.set_admin(self._roles.get_role(ROLE_ADMIN), True)
            self._users.save(user)
        logger.info("Granted admin: username=%s", user.username)
        return user

    def unmake_admin(self, ref: UserRef) -> User:
        with self._unit_of_work():
            user = self._get_by_username(ref.username)
            user.set_admin(self._roles.get_role(ROLE_ADMIN), False)
            self._users.save(user)
        logger.info("Revoked admin: username=%s", user.username)
        return user

    def bootstrap(self, password: str = DEFAULT_SEED_PASSWORD) -> int:
        """
        Ensure the baseline "Admin" and "User" accounts exist.

        Accounts already present are left untouched, so this is safe to run on
        every start. Returns the number of accounts created.
        """
        created = 0
        with self._unit_of_work():
            for username, age, is_admin in SEED_ACCOUNTS:
                if self._users.find_by_username(username) is not None:
                    continue
                self._users.save(
                    User(
                        username=username,
                        password_hash=self._hasher.hash(password),
                        age=age,
                        is_admin=is_admin,
                        roles=self._default_roles(is_admin),
                    )
                )
                created += 1
        if created:
            logger.info("Seeded %s baseline account(s)", created)
        return created
