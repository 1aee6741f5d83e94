"""
core/db.py -- Engine construction shared by auth/store.py and content/store.py.

Both stores use SQLAlchemy Core against the same DATABASE_URL. SQLite is the
default; swapping for PostgreSQL is a connection string change.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/ or content/.
"""

from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    WAL (Write-Ahead Logging) allows readers to proceed without blocking
    during writes. Set per-connection because SQLite PRAGMAs are not
    inherited by new connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str) -> Engine:
    """Create an engine, applying the SQLite connection settings both stores need."""
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        # SQLite requires check_same_thread=False when used from FastAPI's
        # thread pool, where a pooled connection may move between threads.
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine
