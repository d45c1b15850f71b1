"""Executor backed by the standard-library ``sqlite3`` module.

Statements must be rendered with the ``named`` parameter style (``:name``),
which is the default of :class:`~easysql.compile.sqlite.SQLiteDialect`.
"""

from __future__ import annotations

import datetime as dt
import logging
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, TypeVar

from easysql.execute.base import ReaderAction, RowMapper, map_rows
from easysql.schema.types import BoundParameter, DbType

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MEMORY = ":memory:"


class SQLiteExecutor:
    """Runs statements on a single lazily opened SQLite connection.

    The connection is opened on first use and kept until :meth:`close`, so
    an in-memory database survives across calls.  Cursors are scoped to one
    call and always closed.

    Args:
        database: File path or ``":memory:"``.
        connection: An existing connection to use instead of opening one.
            It is not closed by :meth:`close`.
    """

    def __init__(
        self,
        database: str = _MEMORY,
        *,
        connection: sqlite3.Connection | None = None,
    ) -> None:
        self.database = database
        self._connection = connection
        self._owns_connection = connection is None
        if connection is not None:
            connection.row_factory = sqlite3.Row

    @classmethod
    def from_url(cls, url: str) -> SQLiteExecutor:
        """Create an executor from ``sqlite://`` or ``sqlite:///path`` URLs."""
        path = url.split("://", 1)[1] if "://" in url else url
        path = path[1:] if path.startswith("/") else path
        return cls(path or _MEMORY)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """Return the open connection, opening it on first use."""
        if self._connection is None:
            self._connection = sqlite3.connect(self.database)
            self._connection.row_factory = sqlite3.Row
            logger.info("Connected to SQLite database: %s", self.database)
        return self._connection

    def close(self) -> None:
        if self._connection is not None and self._owns_connection:
            self._connection.close()
            logger.info("Closed SQLite database: %s", self.database)
        self._connection = None

    def __enter__(self) -> SQLiteExecutor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        cursor = self.connect().cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    # ------------------------------------------------------------------
    # Executor protocol
    # ------------------------------------------------------------------

    def execute_rowset(
        self, sql: str, params: Sequence[BoundParameter]
    ) -> list[dict[str, Any]]:
        with self._cursor() as cursor:
            cursor.execute(sql, _bind(params))
            return [dict(row) for row in cursor.fetchall()]

    def execute_scalar(self, sql: str, params: Sequence[BoundParameter]) -> Any | None:
        with self._cursor() as cursor:
            cursor.execute(sql, _bind(params))
            row = cursor.fetchone()
            return None if row is None else row[0]

    def execute_non_query(self, sql: str, params: Sequence[BoundParameter]) -> int:
        connection = self.connect()
        with self._cursor() as cursor:
            try:
                cursor.execute(sql, _bind(params))
                connection.commit()
            except sqlite3.Error:
                connection.rollback()
                logger.error("Statement failed, transaction rolled back")
                raise
            return cursor.rowcount

    def query(
        self,
        sql: str,
        params: Sequence[BoundParameter],
        mapper: RowMapper[T],
    ) -> list[T]:
        return map_rows(self.execute_rowset(sql, params), mapper)

    def execute_reader(
        self,
        sql: str,
        params: Sequence[BoundParameter],
        action: ReaderAction,
    ) -> None:
        with self._cursor() as cursor:
            cursor.execute(sql, _bind(params))
            action(dict(row) for row in cursor)


def _bind(params: Sequence[BoundParameter]) -> dict[str, Any]:
    """Convert parameters to ``sqlite3`` bind values.

    Dates and datetimes are bound as ISO-8601 text and decimals as floats,
    since ``sqlite3`` has no native adapters for them.
    """
    values: dict[str, Any] = {}
    for param in params:
        value = param.value
        if isinstance(value, dt.datetime):
            value = value.isoformat(sep=" ")
        elif isinstance(value, dt.date):
            value = value.isoformat()
        elif isinstance(value, Decimal) or (param.db_type is DbType.DECIMAL and value is not None):
            value = float(value)
        values[param.name] = value
    return values
