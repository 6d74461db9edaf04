"""Core app configuration and database."""

from coopqueue.core.config import get_settings, settings
from coopqueue.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
