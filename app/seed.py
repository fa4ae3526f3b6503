"""
CLI entrypoint that creates the baseline "Admin" and "User" accounts if missing:

  python -m app.seed

Safe to run on every deploy; existing accounts are left untouched.
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.security import PasswordHasher
from app.services.user_service import UserService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Seed baseline accounts."""
    settings = get_settings()
    db = SessionLocal()
    try:
        service = UserService(db, PasswordHasher(settings.BCRYPT_ROUNDS))
        created = service.bootstrap(settings.SEED_PASSWORD.get_secret_value())
        logger.info("Seeding completed: accounts_created=%s", created)
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
