"""Database engine setup.

SQLite is the default store at ``{root}/.studyhours/studyhours.db`` in
WAL mode with a busy timeout, so concurrent writers queue on the lock
instead of failing. PostgreSQL URLs are accepted as-is.

SQLAlchemy Core (not ORM) is used: the only mutation is a single upsert
statement, with no need for session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

from studyhours.infrastructure.database.schema import metadata

DB_DIRNAME = ".studyhours"
DB_FILENAME = "studyhours.db"


def default_database_url(root: Path) -> str:
    """SQLite URL for ``{root}/.studyhours/studyhours.db``."""
    return f"sqlite:///{root / DB_DIRNAME / DB_FILENAME}"


def create_db_engine(url: str, *, busy_timeout: float = 30.0) -> Engine:
    """Create an engine for *url*.

    SQLite connections get WAL journaling and a *busy_timeout* (seconds);
    the parent directory of a file database is created if missing.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, echo=False, pool_pre_ping=True)

    if parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, echo=False, connect_args={"timeout": busy_timeout})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout * 1000)}")
        cursor.close()

    return engine


def init_database(url: str, *, busy_timeout: float = 30.0) -> Engine:
    """Create the engine and all tables. Idempotent.

    Returns the engine ready for use. Connection failures propagate:
    being unable to open storage at startup is fatal to the caller.
    """
    engine = create_db_engine(url, busy_timeout=busy_timeout)
    metadata.create_all(engine)
    return engine
