from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from fastapi import HTTPException
from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from vlife.config.settings import settings
from vlife.core.errors import VLifeError

# Lazy initialization so importing the app never opens a database connection
_engine = None
_SessionLocal = None


def _is_postgresql(url: str) -> bool:
    lowered = url.lower()
    return "postgresql" in lowered or "postgres" in lowered


def _get_engine():
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        logger.info(f"Initializing database engine: {settings.database_url}")

        connect_args = {}
        if "sqlite" in settings.database_url.lower():
            logger.warning("Using SQLite database (local development only)")
            connect_args = {"check_same_thread": False}
        elif _is_postgresql(settings.database_url):
            logger.info("Using PostgreSQL database")
            connect_args = {
                "connect_timeout": 10,
                "application_name": "vlife",
            }

        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        logger.info("Database engine initialized")
    return _engine


def _get_session_local():
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


def check_database_connection() -> None:
    """Test database connection on startup."""
    try:
        with _get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("✅ Database connection test successful")
    except Exception as e:
        logger.error(f"❌ Database connection test failed: {e}")
        raise


def init_db() -> None:
    """Create all tables registered on Base.metadata."""
    from vlife.db.models import Base

    Base.metadata.create_all(bind=_get_engine())
    logger.info("Database tables verified")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get database session context manager.

    Everything written inside one `with get_session()` block commits as a
    single transaction when the block exits cleanly.

    - HTTPException / VLifeError: rolled back and re-raised without error logging
      (expected API outcomes, not database failures)
    - Other exceptions: logged as database errors, rolled back, re-raised
    """
    session = _get_session_local()()
    try:
        yield session
        # Always commit: flushed rows no longer show up in session.new
        session.commit()
        logger.debug("Database session committed")
    except (HTTPException, VLifeError):
        logger.debug("Expected error in session, rolling back")
        session.rollback()
        raise
    except Exception as e:
        logger.error(
            f"Database session error, rolling back: {e}. "
            f"Error type: {type(e).__name__}, session state: "
            f"dirty={len(session.dirty)}, new={len(session.new)}, deleted={len(session.deleted)}"
        )
        session.rollback()
        raise
    finally:
        session.close()
