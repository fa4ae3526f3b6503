"""
Create a user (e.g. an extra admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--age N] [--admin]
Example:
  python -m app.scripts.create_user alice your-secure-password --age 30 --admin

An existing user with the same username is replaced.
"""
import argparse
import sys

from app.core.database import SessionLocal
from app.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN, PasswordHasher
from app.schemas.users import UserCreate
from app.services.errors import AccountError
from app.services.user_service import UserService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create an admin panel user.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password (1-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--age", type=int, default=0, help="Age (default 0)")
    parser.add_argument("--admin", action="store_true", help="Grant ROLE_ADMIN")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be 1-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if args.age < 0:
        print("Age must be non-negative.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        service = UserService(db, PasswordHasher())
        user = service.add(
            UserCreate(username=username, password=args.password, age=args.age, is_admin=args.admin)
        )
        print(f"Created user '{user.username}' with roles {', '.join(sorted(user.authorities))}.")
        return 0
    except AccountError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
