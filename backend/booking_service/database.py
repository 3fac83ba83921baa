import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .errors import InternalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SERIALIZABLE = "SERIALIZABLE"


def build_engine(url: str, busy_timeout: float | None = None) -> Engine:
    """
    Create an engine for `url`.

    SQLite gets explicit transaction control: SQLAlchemy emits BEGIN itself,
    and a SERIALIZABLE transaction starts with BEGIN IMMEDIATE so the write
    lock is held before the first read. Competing writers queue on the lock
    for up to `busy_timeout` seconds. The journal runs in WAL mode, so open
    read transactions do not block writers.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    if busy_timeout is None:
        busy_timeout = settings.sqlite_busy_timeout_seconds

    if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
        Path(url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)

    # check_same_thread=False: one connection may serve different FastAPI threads
    engine = create_engine(
        url,
        connect_args={"check_same_thread": False, "timeout": busy_timeout},
    )

    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_connection, _):
        # Disable pysqlite's own BEGIN handling; see _sqlite_begin
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        # Readers see a snapshot and never hold up a writer's COMMIT
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        if conn.get_execution_options().get("isolation_level") == SERIALIZABLE:
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return engine


engine = build_engine(settings.resolved_database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


# FastAPI dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def run_serializable(db: Session, fn: Callable[[Session], T]) -> T:
    """
    Run `fn(db)` inside a serializable transaction.

    Commits when `fn` returns, rolls back and re-raises on any exception
    raised inside it. Whatever the session had pending before the call is
    committed first so the serializable transaction starts clean.
    """
    if db.in_transaction():
        db.commit()

    db.connection(execution_options={"isolation_level": SERIALIZABLE})
    try:
        result = fn(db)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return result


@contextmanager
def db_errors(action: str) -> Iterator[None]:
    """Wrap data-access failures as InternalError, keeping the cause."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Database error while trying to {action}: {e}")
        raise InternalError(f"failed to {action}") from e
