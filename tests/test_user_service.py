"""Tests for app.services.user_service against an in-memory SQLite database."""

import unittest

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import init_db
from app.core.security import PasswordHasher
from app.models import ROLE_ADMIN, ROLE_USER, User
from app.schemas.users import UserCreate, UserRef, UserUpdate
from app.services.errors import RoleNotFoundError, UsernameConflictError, UserNotFoundError
from app.services.user_service import UserService

# Lowest bcrypt cost keeps the suite fast.
TEST_HASHER = PasswordHasher(rounds=4)


def _sessionmaker() -> sessionmaker:
    """Fresh in-memory database with roles seeded."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _new_user(
    username: str = "alice",
    password: str = "pw1",
    age: int = 30,
    is_admin: bool = False,
) -> UserCreate:
    return UserCreate(username=username, password=password, age=age, is_admin=is_admin)


class ServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.Session = _sessionmaker()
        self.db: Session = self.Session()
        self.service = UserService(self.db, TEST_HASHER)

    def tearDown(self) -> None:
        self.db.close()

    def count_users(self) -> int:
        return self.db.scalar(select(func.count()).select_from(User))

    def stored(self, username: str) -> User | None:
        self.db.expire_all()
        return self.db.scalars(select(User).where(User.username == username)).one_or_none()


class TestAdd(ServiceTestCase):
    """add hashes the password and assigns roles from is_admin."""

    def test_regular_user_gets_base_role_only(self) -> None:
        self.service.add(_new_user())
        user = self.stored("alice")
        self.assertIsNotNone(user)
        self.assertEqual(user.authorities, {ROLE_USER})
        self.assertFalse(user.is_admin)
        self.assertEqual(user.age, 30)

    def test_admin_gets_base_and_admin_roles(self) -> None:
        self.service.add(_new_user(is_admin=True))
        user = self.stored("alice")
        self.assertEqual(user.authorities, {ROLE_USER, ROLE_ADMIN})
        self.assertTrue(user.is_admin)

    def test_password_stored_as_digest(self) -> None:
        self.service.add(_new_user(password="pw1"))
        user = self.stored("alice")
        self.assertNotEqual(user.password_hash, "pw1")
        self.assertTrue(TEST_HASHER.verify("pw1", user.password_hash))
        self.assertFalse(TEST_HASHER.verify("pw2", user.password_hash))

    def test_returns_persisted_user_with_id(self) -> None:
        user = self.service.add(_new_user())
        self.assertIsNotNone(user.id)

    def test_duplicate_username_replaces_existing_record(self) -> None:
        self.service.add(_new_user(password="pw1", age=30, is_admin=True))
        self.service.add(_new_user(password="pw2", age=31, is_admin=False))
        self.assertEqual(self.count_users(), 1)
        user = self.stored("alice")
        self.assertEqual(user.age, 31)
        self.assertFalse(user.is_admin)
        self.assertEqual(user.authorities, {ROLE_USER})
        self.assertTrue(TEST_HASHER.verify("pw2", user.password_hash))

    def test_duplicate_does_not_touch_other_users(self) -> None:
        self.service.add(_new_user(username="bob"))
        self.service.add(_new_user())
        self.service.add(_new_user())
        self.assertEqual(self.count_users(), 2)
        self.assertIsNotNone(self.stored("bob"))


class TestLookups(ServiceTestCase):
    def test_load_for_authentication_returns_principal(self) -> None:
        self.service.add(_new_user(is_admin=True))
        principal = self.service.load_for_authentication("alice")
        self.assertEqual(principal.username, "alice")
        self.assertEqual(principal.authorities, frozenset({ROLE_USER, ROLE_ADMIN}))
        self.assertTrue(TEST_HASHER.verify("pw1", principal.password_hash))

    def test_load_for_authentication_unknown_raises(self) -> None:
        with self.assertRaises(UserNotFoundError) as ctx:
            self.service.load_for_authentication("ghost")
        self.assertEqual(ctx.exception.username, "ghost")

    def test_principal_repr_hides_digest(self) -> None:
        self.service.add(_new_user())
        principal = self.service.load_for_authentication("alice")
        self.assertNotIn(principal.password_hash, repr(principal))

    def test_find_by_username(self) -> None:
        self.service.add(_new_user())
        self.assertEqual(self.service.find_by_username("alice").username, "alice")
        with self.assertRaises(UserNotFoundError):
            self.service.find_by_username("ghost")

    def test_list_all(self) -> None:
        self.assertEqual(self.service.list_all(), [])
        self.service.add(_new_user(username="alice"))
        self.service.add(_new_user(username="bob"))
        self.assertEqual(sorted(u.username for u in self.service.list_all()), ["alice", "bob"])


class TestUpdate(ServiceTestCase):
    """update overwrites every field and always re-hashes the password."""

    def _update(self, user_id: int, **kwargs: object) -> User:
        fields = {"username": "alice", "password": "new-pw", "age": 40, "is_admin": False, "roles": []}
        fields.update(kwargs)
        return self.service.update(UserUpdate(id=user_id, **fields))

    def test_overwrites_fields(self) -> None:
        user_id = self.service.add(_new_user()).id
        self._update(user_id, username="alice2", age=41)
        self.assertIsNone(self.stored("alice"))
        user = self.stored("alice2")
        self.assertEqual(user.id, user_id)
        self.assertEqual(user.age, 41)
        self.assertTrue(TEST_HASHER.verify("new-pw", user.password_hash))

    def test_rehashes_value_even_if_already_a_digest(self) -> None:
        user = self.service.add(_new_user())
        old_digest = user.password_hash
        self._update(user.id, password=old_digest)
        stored = self.stored("alice")
        self.assertNotEqual(stored.password_hash, old_digest)
        self.assertTrue(TEST_HASHER.verify(old_digest, stored.password_hash))

    def test_unknown_id_raises_without_side_effect(self) -> None:
        self.service.add(_new_user())
        with self.assertRaises(UserNotFoundError) as ctx:
            self._update(999, username="other")
        self.assertEqual(ctx.exception.user_id, 999)
        self.assertEqual(self.count_users(), 1)
        self.assertIsNone(self.stored("other"))

    def test_is_admin_true_grants_admin_role(self) -> None:
        user_id = self.service.add(_new_user()).id
        self._update(user_id, is_admin=True, roles=[ROLE_USER])
        user = self.stored("alice")
        self.assertTrue(user.is_admin)
        self.assertEqual(user.authorities, {ROLE_USER, ROLE_ADMIN})

    def test_is_admin_false_revokes_admin_role(self) -> None:
        user_id = self.service.add(_new_user(is_admin=True)).id
        self._update(user_id, is_admin=False, roles=[ROLE_USER, ROLE_ADMIN])
        user = self.stored("alice")
        self.assertFalse(user.is_admin)
        self.assertEqual(user.authorities, {ROLE_USER})

    def test_empty_roles_fall_back_to_defaults(self) -> None:
        user_id = self.service.add(_new_user()).id
        self._update(user_id, is_admin=True, roles=[])
        self.assertEqual(self.stored("alice").authorities, {ROLE_USER, ROLE_ADMIN})

    def test_unknown_role_raises_and_rolls_back(self) -> None:
        user_id = self.service.add(_new_user()).id
        with self.assertRaises(RoleNotFoundError):
            self._update(user_id, age=99, roles=["ROLE_GHOST"])
        self.assertEqual(self.stored("alice").age, 30)

    def test_username_taken_by_other_user_raises_conflict(self) -> None:
        self.service.add(_new_user(username="bob"))
        user_id = self.service.add(_new_user()).id
        with self.assertRaises(UsernameConflictError):
            self._update(user_id, username="bob")
        self.assertIsNotNone(self.stored("alice"))
        self.assertEqual(self.count_users(), 2)


class TestDelete(ServiceTestCase):
    def test_deletes_existing_user(self) -> None:
        self.service.add(_new_user(is_admin=True))
        self.service.delete(UserRef(username="alice"))
        self.assertIsNone(self.stored("alice"))
        self.assertEqual(self.count_users(), 0)

    def test_unknown_username_is_idempotent_no_op(self) -> None:
        self.service.add(_new_user(username="bob"))
        self.service.delete(UserRef(username="ghost"))
        self.service.delete(UserRef(username="ghost"))
        self.assertEqual(self.count_users(), 1)


class TestAdminFlag(ServiceTestCase):
    """make_admin / unmake_admin keep is_admin and ROLE_ADMIN together."""

    def test_make_admin(self) -> None:
        self.service.add(_new_user())
        self.service.make_admin(UserRef(username="alice"))
        user = self.stored("alice")
        self.assertTrue(user.is_admin)
        self.assertEqual(user.authorities, {ROLE_USER, ROLE_ADMIN})

    def test_make_admin_twice_keeps_single_admin_role(self) -> None:
        self.service.add(_new_user())
        self.service.make_admin(UserRef(username="alice"))
        self.service.make_admin(UserRef(username="alice"))
        self.assertEqual(len(self.stored("alice").roles), 2)

    def test_make_then_unmake_restores_previous_state(self) -> None:
        self.service.add(_new_user())
        before = (self.stored("alice").authorities, self.stored("alice").is_admin)
        self.service.make_admin(UserRef(username="alice"))
        self.service.unmake_admin(UserRef(username="alice"))
        user = self.stored("alice")
        self.assertEqual((user.authorities, user.is_admin), before)

    def test_unknown_user_raises(self) -> None:
        with self.assertRaises(UserNotFoundError):
            self.service.make_admin(UserRef(username="ghost"))
        with self.assertRaises(UserNotFoundError):
            self.service.unmake_admin(UserRef(username="ghost"))


class TestBootstrap(ServiceTestCase):
    def test_empty_store_gets_admin_and_user(self) -> None:
        created = self.service.bootstrap()
        self.assertEqual(created, 2)
        self.assertEqual(self.count_users(), 2)
        admin = self.stored("Admin")
        user = self.stored("User")
        self.assertEqual(admin.authorities, {ROLE_USER, ROLE_ADMIN})
        self.assertTrue(admin.is_admin)
        self.assertEqual(user.authorities, {ROLE_USER})
        self.assertFalse(user.is_admin)
        self.assertTrue(TEST_HASHER.verify("123", admin.password_hash))
        self.assertTrue(TEST_HASHER.verify("123", user.password_hash))

    def test_rerun_does_not_duplicate(self) -> None:
        self.service.bootstrap()
        self.assertEqual(self.service.bootstrap(), 0)
        self.assertEqual(self.count_users(), 2)

    def test_existing_account_left_untouched(self) -> None:
        self.service.add(_new_user(username="Admin", password="custom", age=50))
        self.assertEqual(self.service.bootstrap(), 1)
        admin = self.stored("Admin")
        self.assertEqual(admin.age, 50)
        self.assertTrue(TEST_HASHER.verify("custom", admin.password_hash))


if __name__ == "__main__":
    unittest.main()
