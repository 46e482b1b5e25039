"""
Database engine and session management for the video catalog.

This module provides:
- URL validation (SQLite file location checks, other backends passed through)
- A Database object owning the engine and session factory
- Session-per-operation context manager with rollback and logging
- SQLite optimization settings (WAL mode, foreign keys, timeouts)
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError, OperationalError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool

from .models import Base
from vodsync.logger import setup_logging, log_function


db_logger = setup_logging(logger_name="database")


def validate_database_url(url: str) -> tuple[bool, str]:
    """
    Validate the database URL format and, for SQLite, its file location.

    Returns:
        (True, database path or URL) when usable, (False, error message) otherwise.
    """
    if not url:
        return False, "Database URL is empty"
    try:
        parsed = make_url(url)
    except ArgumentError as e:
        return False, f"Invalid database URL format: {e}"

    if parsed.get_backend_name() != "sqlite":
        return True, parsed.render_as_string(hide_password=True)

    db_path = parsed.database
    if not db_path or db_path == ":memory:":
        return False, "SQLite database must be a file (session-per-operation)"

    parent_dir = Path(db_path).parent
    if not parent_dir.exists():
        return False, f"Database directory does not exist: {parent_dir}"

    return True, db_path


def optimize_sqlite_connection(dbapi_connection, connection_record):
    """Apply SQLite-specific optimizations when connection is created."""
    cursor = dbapi_connection.cursor()

    # WAL lets the status command read while the worker writes
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA synchronous=NORMAL")

    cursor.close()


class Database:
    """
    Engine plus session factory for one database URL.

    Usage:
        db = Database("sqlite:///data/vodsync.db")
        db.init_database()
        with db.session() as session:
            session.add(CatalogEntry(en_us="Show"))
            session.commit()
    """

    def __init__(self, database_url: str):
        is_valid, db_info = validate_database_url(database_url)
        if not is_valid:
            db_logger.error(f"Database configuration error: {db_info}")
            raise ValueError(f"Database configuration error: {db_info}")

        self.database_url = database_url
        self.db_info = db_info
        self.is_sqlite = make_url(database_url).get_backend_name() == "sqlite"

        try:
            if self.is_sqlite:
                self.engine = create_engine(
                    database_url,
                    poolclass=NullPool,  # Avoid connection pooling issues with SQLite
                    connect_args={"check_same_thread": False, "timeout": 30},
                )
                event.listen(self.engine, "connect", optimize_sqlite_connection)
            else:
                self.engine = create_engine(database_url, pool_pre_ping=True)
        except Exception as e:
            db_logger.error(f"Failed to create database engine: {e}")
            raise

        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )
        db_logger.info(f"Database configured: {db_info}")

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions (session-per-operation pattern).

        Changes are only persisted when the caller commits; any error rolls
        the session back, is logged, and is re-raised.
        """
        session = self.SessionLocal()
        try:
            db_logger.debug("Database session created")
            yield session

        except OperationalError as e:
            db_logger.error(f"Database operational error: {e}")
            session.rollback()
            error_msg = str(e.orig) if hasattr(e, "orig") else str(e)
            if "no such table" in error_msg.lower():
                raise OperationalError(
                    "Database table does not exist. Run `python -m vodsync --init-db` "
                    "or the alembic migrations first.",
                    None,
                    e.orig,
                )
            raise

        except SQLAlchemyError as e:
            db_logger.error(f"Database error: {e}")
            session.rollback()
            raise

        except Exception as e:
            db_logger.error(f"Unexpected error inside database session: {e}")
            session.rollback()
            raise

        finally:
            session.close()
            db_logger.debug("Database session closed")

    @log_function(logger_name="database", log_execution_time=True)
    def init_database(self) -> bool:
        """
        Create all tables defined in the models.

        Note: This does not run Alembic migrations.
        """
        try:
            Base.metadata.create_all(bind=self.engine)
            db_logger.info("Database tables created successfully")
            return True
        except SQLAlchemyError as e:
            db_logger.error(f"Failed to initialize database: {e}")
            return False

    def check_connection(self) -> bool:
        """Return True if a trivial query succeeds."""
        try:
            with self.session() as session:
                session.execute(text("SELECT 1"))
            db_logger.info("Database connection test successful")
            return True
        except SQLAlchemyError as e:
            db_logger.error(f"Database connection test failed: {e}")
            return False

    def get_database_info(self) -> dict:
        """Describe the configured database (file size for SQLite)."""
        info = {
            "database": self.db_info,
            "engine_pool_class": self.engine.pool.__class__.__name__,
        }
        if self.is_sqlite:
            if os.path.exists(self.db_info):
                file_stats = os.stat(self.db_info)
                info.update(
                    {
                        "file_exists": True,
                        "file_size_bytes": file_stats.st_size,
                        "file_size_mb": round(file_stats.st_size / (1024 * 1024), 2),
                        "last_modified": file_stats.st_mtime,
                    }
                )
            else:
                info["file_exists"] = False
        return info
