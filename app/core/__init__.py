"""Core app configuration, database and security."""

from app.core.config import get_settings, settings
from app.core.database import get_db, init_db

__all__ = ["get_settings", "settings", "get_db", "init_db"]
