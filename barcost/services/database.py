"""
SQLite engine and session handling for Bar Costing.

One process-wide engine and session factory are created lazily from
``get_config()``. Services open a unit of work with ``session_scope()``; the
costing engine works on the loaded objects and the scope commits every
lot deduction, audit row and status change at once, or none of them.
"""

from typing import Optional
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..utils.config import get_config
from ..models.base import Base

logger = logging.getLogger(__name__)

# Applied to every new SQLite connection. foreign_keys drives the
# CASCADE / SET NULL rules on lots, recipe lines and audit rows.
_SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON",
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
)

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    if type(dbapi_connection).__module__.split(".")[0] not in ("sqlite3", "pysqlite2"):
        return

    cursor = dbapi_connection.cursor()
    for pragma in _SQLITE_PRAGMAS:
        cursor.execute(pragma)
    cursor.close()


def _register_models() -> None:
    from .. import models  # noqa: F401


def _is_memory_url(database_url: str) -> bool:
    return ":memory:" in database_url or "mode=memory" in database_url


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Build an engine for the configured database file, or for ``database_url``.

    In-memory URLs get a StaticPool so every session sees the same database.

    Args:
        database_url: SQLAlchemy URL; defaults to ``Config.database_url``
        echo: Log emitted SQL

    Returns:
        SQLAlchemy Engine
    """
    config = get_config()
    if database_url is None:
        config.ensure_directories()
        database_url = config.database_url

    connect_args = {"check_same_thread": False}
    options = {"echo": echo}
    if _is_memory_url(database_url):
        options["poolclass"] = StaticPool
    else:
        connect_args["timeout"] = config.db_timeout

    logger.info(f"Creating database engine: {database_url}")
    return create_engine(database_url, connect_args=connect_args, **options)


def init_database(engine: Optional[Engine] = None) -> None:
    """Create any missing tables. Existing tables are left alone."""
    engine = engine or get_engine()
    _register_models()
    Base.metadata.create_all(engine)
    logger.info(f"Database tables ready: {len(Base.metadata.tables)}")


def get_engine(force_recreate: bool = False) -> Engine:
    global _engine

    if _engine is None or force_recreate:
        _engine = create_database_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    """
    Return the shared sessionmaker.

    Sessions keep loaded attributes after commit (``expire_on_commit=False``)
    so services can hand models back to callers once the scope has closed.
    """
    global _SessionFactory

    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _SessionFactory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope():
    """
    Transactional unit of work.

    Commits when the block exits normally; any exception rolls back every
    change made in the block and is re-raised unchanged.

    Example:
        with session_scope() as session:
            event = session.get(Event, event_id)
            complete(event, drinks, ingredient_lookup(session))
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def verify_database() -> bool:
    """Return True when every mapped table exists in the database."""
    _register_models()
    try:
        existing = set(inspect(get_engine()).get_table_names())
    except SQLAlchemyError as e:
        logger.error(f"Database verification failed: {e}")
        return False

    missing = set(Base.metadata.tables) - existing
    if missing:
        logger.warning(f"Missing tables: {', '.join(sorted(missing))}")
    return not missing


def reset_database(confirm: bool = False) -> None:
    """
    Drop and recreate every table. All stock, drinks and events are lost.

    Raises:
        ValueError: If confirm is not True
    """
    if not confirm:
        raise ValueError("Must pass confirm=True to reset database. This will delete all data!")

    engine = get_engine()
    _register_models()

    logger.warning("Resetting database: dropping all tables")
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    logger.info("Tables recreated")


def close_connections() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _SessionFactory

    _SessionFactory = None
    if _engine is not None:
        _engine.dispose()
        _engine = None
    logger.info("Database connections closed")


def initialize_app_database() -> None:
    """Create the database file and tables on first run, then verify them."""
    config = get_config()
    state = "existing" if config.database_exists() else "new"
    logger.info(f"Using {state} database at: {config.database_path}")

    init_database(get_engine())

    if not verify_database():
        logger.warning("Database verification failed after initialization")
