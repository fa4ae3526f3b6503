"""Database engine, session factory and schema bootstrap for local runs."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine, select, text
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings


def _engine_kwargs(url: str) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"echo": settings.DEBUG}
    if url.startswith("sqlite://"):
        # Request handlers run in a threadpool; SQLite connections must be shareable.
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_pre_ping"] = True
    return kwargs


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def init_db(bind: Engine) -> None:
    """
    Create all tables and insert the reference roles that are missing.

    Production schemas are managed by Alembic; this is for SQLite/dev runs and tests.
    """
    from app.models import Base, Role
    from app.models.role import ROLE_NAMES

    Base.metadata.create_all(bind=bind)
    with Session(bind) as session:
        existing = set(session.scalars(select(Role.name)))
        for name in ROLE_NAMES:
            if name not in existing:
                session.add(Role(name=name))
        session.commit()
