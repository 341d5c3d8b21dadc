"""
Database Session Management - Core database connectivity layer
"""

from datetime import datetime, timezone
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
from typing import Generator
import logging

from task_tracker.core.config import settings

logger = logging.getLogger(__name__)

def utcnow() -> datetime:
    """Naive UTC timestamp - all DateTime columns store UTC without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def _engine_options(database_url: str) -> dict:
    """Pool options per backend - SQLite (tests, local runs) has no connection pool to tune."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        options = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool  # One shared connection keeps the in-memory DB alive
        return options
    return {
        "pool_size": settings.DB_POOL_SIZE,  # Number of persistent connections
        "max_overflow": settings.DB_MAX_OVERFLOW,  # Additional connections when pool is exhausted
        "pool_timeout": settings.DB_POOL_TIMEOUT,  # Wait time for available connection
        "pool_pre_ping": True,  # Verify connection health before using
    }

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # Log all SQL queries in debug mode
    **_engine_options(settings.DATABASE_URL),
)

@event.listens_for(engine, "connect")
def receive_connect(dbapi_conn, connection_record):
    logger.debug("🔌 New database connection established")
    if engine.dialect.name == "sqlite":
        # SQLite ignores FOREIGN KEY clauses (incl. ON DELETE SET NULL) unless enabled per connection
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

@event.listens_for(engine, "close")
def receive_close(dbapi_conn, connection_record):
    logger.debug("🔌 Database connection closed")

# Session factory - creates new sessions for each request
SessionLocal = sessionmaker(
    autocommit=False,  # Services commit explicitly through store transactions
    autoflush=False,
    expire_on_commit=False,  # Returned entities stay readable after commit
    bind=engine,
)

# Base class for all SQLAlchemy models
Base = declarative_base()

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides database session per request.
    Automatically handles session lifecycle and cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.debug(f"↩️  Rolling back session after error: {type(e).__name__}")
        db.rollback()  # Never leave a half-applied transaction behind
        raise
    finally:
        db.close()
        logger.debug("✅ Database session closed")

def init_db() -> None:
    """
    Initialize database by creating all tables.
    Used for development setup - production should use migrations.
    """
    logger.info("🏗️  Creating database tables...")
    try:
        from task_tracker.models import user, task  # noqa: F401 - register models with Base
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Database tables created successfully")
    except Exception as e:
        logger.error(f"❌ Failed to create database tables: {str(e)}", exc_info=True)
        raise  # Fail fast - app shouldn't start without database

def check_db_connection() -> bool:
    """
    Verify database connectivity - used for health checks and startup validation.
    Returns True if connection successful, False otherwise.
    """
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Database connection failed: {str(e)}", exc_info=True)
        return False

def get_pool_stats() -> dict:
    """
    Get current database connection pool statistics.
    Useful for monitoring connection usage and detecting leaks.
    """
    pool = engine.pool
    if not isinstance(pool, QueuePool):
        return {"pool": type(pool).__name__}  # SQLite pools expose no counters
    return {
        "pool_size": pool.size(),  # Total connections in pool
        "checked_out": pool.checkedout(),  # Currently active connections
        "overflow": pool.overflow(),  # Connections beyond pool_size
        "checked_in": pool.checkedin(),  # Idle connections in pool
    }

def close_db_connections():
    """
    Gracefully close all database connections.
    Called during application shutdown.
    """
    logger.info("🔌 Closing database connections...")
    engine.dispose()
    logger.info("✅ All database connections closed")
