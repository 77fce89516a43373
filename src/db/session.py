"""Database session management for Listing Quality Scorer."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import get_db_path

from .models import Base, ListingScoreDB

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Process-wide engine, created on first use
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_database_url() -> str:
    """SQLite URL of the score history database."""
    return f"sqlite:///{get_db_path()}"


def get_engine() -> Engine:
    """Get or create the SQLAlchemy engine."""
    global _engine
    if _engine is None:
        url = get_database_url()
        logger.debug(f"Opening score database at {url}")
        _engine = create_engine(
            url,
            echo=False,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
        )
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _session_factory


def get_session() -> Session:
    """Create a new database session."""
    return get_session_factory()()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_database(use_migrations: bool = True) -> None:
    """Create or upgrade the score history schema.

    Args:
        use_migrations: If True, use Alembic migrations. If False, use create_all().
    """
    engine = get_engine()
    if use_migrations:
        _run_migrations(engine)
    else:
        Base.metadata.create_all(engine)


def _alembic_config(engine: Engine):
    from alembic.config import Config

    alembic_ini = PROJECT_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        return None

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    config.set_main_option("sqlalchemy.url", str(engine.url))
    # Keep the application logging setup intact
    config.attributes["configure_logger"] = False
    return config


def _run_migrations(engine: Engine) -> None:
    """Run Alembic migrations to the latest revision."""
    from alembic import command
    from alembic.runtime.migration import MigrationContext
    from alembic.script import ScriptDirectory

    config = _alembic_config(engine)
    if config is None:
        logger.warning(f"alembic.ini not found under {PROJECT_ROOT}, falling back to create_all()")
        Base.metadata.create_all(engine)
        return

    with engine.connect() as connection:
        current_rev = MigrationContext.configure(connection).get_current_revision()
    head_rev = ScriptDirectory.from_config(config).get_current_head()

    if current_rev is None:
        tables = inspect(engine).get_table_names()
        if ListingScoreDB.__tablename__ in tables:
            # Schema predates migrations
            logger.info("Existing score database detected, stamping with current migration version")
            command.stamp(config, "head")
        else:
            logger.info("Running database migrations...")
            command.upgrade(config, "head")
            logger.info("Database migrations completed")
    elif current_rev != head_rev:
        logger.info(f"Upgrading database from {current_rev} to {head_rev}")
        command.upgrade(config, "head")
        logger.info("Database upgrade completed")
    else:
        logger.debug("Database is up to date")


def reset_database() -> None:
    """Drop and recreate all tables (for testing only)."""
    engine = get_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)


def close_database() -> None:
    """Dispose of the engine so the next call reopens the database."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        _engine = None
    _session_factory = None
