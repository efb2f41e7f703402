"""Base repository class."""

from typing import Any

import duckdb
from loguru import logger

from app.repositories.db import DB_LOCK, get_db


class BaseRepository:
    """Base repository over one DuckDB connection.

    Repositories built in one thread share its connection with the forecast
    workers, so every statement and its fetch run under the module-wide
    `DB_LOCK`.
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection | None = None, read_only: bool = False):
        self._db = conn if conn is not None else get_db(read_only)
        self._read_only = read_only
        logger.debug("{} initialized", self.__class__.__name__)

    def _require_writable(self) -> None:
        if self._read_only:
            raise RuntimeError(f"{self.__class__.__name__} is read-only")

    def _run(self, query: str, params: list | None, fetch: str | None) -> Any:
        with DB_LOCK:
            cur = self._db.execute(query, params) if params else self._db.execute(query)
            if fetch == "all":
                return cur.fetchall()
            if fetch == "one":
                return cur.fetchone()
            return None

    def execute(self, query: str, params: list | None = None) -> None:
        """Execute SQL statement."""
        self._run(query, params, None)

    def fetchall(self, query: str, params: list | None = None) -> list:
        """Execute and fetch all rows."""
        return self._run(query, params, "all")

    def fetchone(self, query: str, params: list | None = None) -> Any:
        """Execute and fetch one row."""
        return self._run(query, params, "one")
