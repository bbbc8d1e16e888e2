"""
Database session management.

Provides explicit ORM session handling with SQLAlchemy.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from habitlog.core.config import Config
from habitlog.core.models import Base

logger = logging.getLogger(__name__)

# One engine per database path for the life of the process
_engines: Dict[str, Engine] = {}


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(config: Config) -> Engine:
    """
    Get the SQLAlchemy engine for the configured database.

    File databases use WAL mode. The in-memory database keeps a single
    shared connection so every session sees the same schema and rows.
    """
    engine = _engines.get(config.database_path)
    if engine is not None:
        return engine

    if config.is_memory:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_path = Path(config.database_path).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)

        engine = create_engine(
            f"sqlite:///{db_path}",
            connect_args={"check_same_thread": False},
        )

    event.listen(engine, "connect", _enable_foreign_keys)

    if not config.is_memory:
        with engine.connect() as conn:
            conn.execute(text("PRAGMA journal_mode=WAL"))
            conn.commit()

    logger.debug(f"Opened database {config.database_path}")
    _engines[config.database_path] = engine
    return engine


def init_db(config: Config) -> None:
    """
    Initialize database schema.

    Creates all tables and indexes if they don't exist.
    """
    engine = get_engine(config)
    Base.metadata.create_all(engine)


def get_session(config: Config) -> Session:
    """
    Create a new database session.

    Loaded objects stay readable after commit and close.
    """
    engine = get_engine(config)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    return SessionLocal()


@contextmanager
def session_scope(config: Config) -> Generator[Session, None, None]:
    """
    Provide transactional scope around a series of operations.

    Usage:
        with session_scope(config) as session:
            session.add(habit)
    """
    session = get_session(config)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def describe_database(config: Config) -> str:
    """Location of the database, as shown to the user."""
    if config.is_memory:
        return config.database_path
    return str(Path(config.database_path).expanduser())
