"""
Database engine construction.

Builds the SQLAlchemy engine used by every market repository.
SQLite connections are patched so that SAVEPOINTs behave, the
haversine_km() function is available to discovery queries, and lower()
folds non-ASCII letters the same way keywords are folded.
"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from app.domain.market.discovery import haversine_km

logger = logging.getLogger(__name__)


def build_engine(dsn: str, echo: bool = False) -> Engine:
    """Create an engine for ``dsn``.

    Args:
        dsn: SQLAlchemy database URL.
        echo: Log every SQL statement.

    Returns:
        A configured SQLAlchemy engine.
    """
    if dsn.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in dsn or dsn in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(dsn, echo=echo, **kwargs)
        _install_sqlite_hooks(engine)
    else:
        engine = create_engine(dsn, echo=echo, pool_pre_ping=True)

    logger.info("Database engine created for dialect=%s", engine.dialect.name)
    return engine


def _sql_lower(value):
    return value.lower() if isinstance(value, str) else value


def _install_sqlite_hooks(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record) -> None:
        # Let SQLAlchemy emit BEGIN itself so nested SAVEPOINTs work.
        dbapi_connection.isolation_level = None
        dbapi_connection.create_function(
            "haversine_km", 4, haversine_km, deterministic=True
        )
        # SQLite's built-in lower() only folds ASCII.
        dbapi_connection.create_function("lower", 1, _sql_lower, deterministic=True)

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")
