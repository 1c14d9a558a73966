"""Database utilities for stored notices."""

from .models import Base, JobRun, JobStatus, Notification  # noqa: F401
from .session import get_engine, get_sessionmaker, init_db, session_scope  # noqa: F401

__all__ = [
    "Base",
    "JobRun",
    "JobStatus",
    "Notification",
    "get_engine",
    "get_sessionmaker",
    "init_db",
    "session_scope",
]
