"""
Database engine and session factory.

Pool parameters (PostgreSQL only):
- pool_size: persistent connections kept open
- max_overflow: extra connections allowed at peak (pool_size + max_overflow)
- pool_timeout: seconds to wait for a free connection
- pool_recycle: recycle period, keeps idle connections from being dropped
- pool_pre_ping: check a connection is alive before handing it out

SQLite URLs (development and tests) skip pooling; ``sqlite://`` without a path
uses a single shared in-memory connection.
"""

import logging
import time

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shipyard.config import settings

logger = logging.getLogger("shipyard.db")


def build_engine(url: str) -> Engine:
    """Create an engine for ``url`` with slow-query monitoring attached."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=settings.DB_ECHO, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(
            url,
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            echo=settings.DB_ECHO,
        )

    event.listen(engine, "before_cursor_execute", _before_cursor_execute)
    event.listen(engine, "after_cursor_execute", _after_cursor_execute)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ---------------------------------------------------------------------------
# Slow query monitoring
# ---------------------------------------------------------------------------
def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    total_ms = (time.perf_counter() - conn.info["query_start_time"].pop()) * 1000

    if total_ms >= settings.SLOW_QUERY_THRESHOLD_MS:
        # Truncate long statements to keep log lines bounded
        stmt_preview = statement[:500] + "..." if len(statement) > 500 else statement
        logger.warning(
            "Slow query detected (%.2fms >= %dms): %s",
            total_ms,
            settings.SLOW_QUERY_THRESHOLD_MS,
            stmt_preview,
        )
