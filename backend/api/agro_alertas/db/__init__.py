"""Database utilities and models package."""

from .base import Base  # noqa: F401
from .session import get_db_session, get_engine, get_session_factory  # noqa: F401
