"""DuckDB connection management."""

import threading
from pathlib import Path

import duckdb
from loguru import logger

from app.models import ALL_DDL
from settings import DB_PATH

_local = threading.local()

# Worker threads share the container's connection; one statement and its fetch at a time.
DB_LOCK = threading.RLock()


def db_exists(path: str = DB_PATH) -> bool:
    """Check if database file exists."""
    return path == ":memory:" or Path(path).exists()


def init_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Create all tables (idempotent - DDL uses IF NOT EXISTS)."""
    for ddl in ALL_DDL:
        conn.execute(ddl)
    logger.debug("DB tables ensured")


def connect(path: str = DB_PATH, read_only: bool = False) -> duckdb.DuckDBPyConnection:
    """Open a connection, creating the file and tables when missing."""
    if not db_exists(path):
        logger.warning("DB not found: {}. Creating empty DB.", path)
        read_only = False
    conn = duckdb.connect(path, read_only=read_only)
    if not read_only:
        init_tables(conn)
    logger.debug("DB connected: {} (read_only={})", path, read_only)
    return conn


def get_db(read_only: bool = False) -> duckdb.DuckDBPyConnection:
    """Get thread-local connection."""
    if getattr(_local, "conn", None) is None:
        _local.conn = connect(DB_PATH, read_only)
    return _local.conn


def close_db() -> None:
    """Close thread-local connection."""
    if getattr(_local, "conn", None) is not None:
        _local.conn.close()
        _local.conn = None
        logger.debug("DB connection closed")
