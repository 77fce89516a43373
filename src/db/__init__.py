"""Database layer for Listing Quality Scorer."""

from .models import Base, ListingScoreDB
from .repository import Repository
from .session import close_database, get_engine, get_session, init_database, session_scope

__all__ = [
    "Base",
    "ListingScoreDB",
    "Repository",
    "close_database",
    "get_engine",
    "get_session",
    "init_database",
    "session_scope",
]
