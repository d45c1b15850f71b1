"""Executor backed by a SQLAlchemy ``Engine``.

Install the optional dependency before using this module::

    pip install "easysql[sqlalchemy]"

Statements are wrapped in ``text()``, so they must be rendered with the
``named`` parameter style (``:name``) whatever the backend; SQLAlchemy
translates the placeholders to the driver's own style.

Example::

    from sqlalchemy import create_engine
    from easysql.execute.sqlalchemy import SQLAlchemyExecutor

    executor = SQLAlchemyExecutor(create_engine("postgresql+psycopg://..."))
    assembler = QueryAssembler(executor, PostgresDialect(paramstyle="named"))
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from easysql.execute.base import ReaderAction, RowMapper, bind_values, map_rows
from easysql.schema.types import BoundParameter

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLAlchemyExecutor:
    """Runs statements through a SQLAlchemy engine.

    Each call checks a connection out of the engine's pool inside a ``with``
    block, so it is returned on every exit path.  Non-queries run inside
    ``engine.begin()`` and are committed, or rolled back when the driver
    raises.

    Args:
        engine: The engine to execute on.
        dispose_on_close: Dispose the engine's pool in :meth:`close`.  Set
            automatically by :meth:`from_url`, which owns the engine.
    """

    def __init__(self, engine: Engine, *, dispose_on_close: bool = False) -> None:
        from sqlalchemy import text

        self._engine = engine
        self._text = text
        self._dispose_on_close = dispose_on_close

    @classmethod
    def from_url(cls, url: str, **engine_kwargs: Any) -> SQLAlchemyExecutor:
        """Create an engine for ``url`` and an executor that owns it."""
        from sqlalchemy import create_engine

        engine = create_engine(url, **engine_kwargs)
        logger.info("Created SQLAlchemy engine for dialect: %s", engine.dialect.name)
        return cls(engine, dispose_on_close=True)

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        if self._dispose_on_close:
            self._engine.dispose()
            logger.info("Disposed SQLAlchemy engine")

    def __enter__(self) -> SQLAlchemyExecutor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Executor protocol
    # ------------------------------------------------------------------

    def execute_rowset(
        self, sql: str, params: Sequence[BoundParameter]
    ) -> list[dict[str, Any]]:
        with self._engine.connect() as conn:
            result = conn.execute(self._text(sql), bind_values(params))
            return [dict(row) for row in result.mappings()]

    def execute_scalar(self, sql: str, params: Sequence[BoundParameter]) -> Any | None:
        with self._engine.connect() as conn:
            return conn.execute(self._text(sql), bind_values(params)).scalar()

    def execute_non_query(self, sql: str, params: Sequence[BoundParameter]) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(self._text(sql), bind_values(params))
            return result.rowcount

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
        with self._engine.connect() as conn:
            result = conn.execute(self._text(sql), bind_values(params))
            action(dict(row) for row in result.mappings())
