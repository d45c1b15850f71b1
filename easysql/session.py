"""Assembler sessions: one fresh assembler per logical query.

An ``AssemblerFactory`` is immutable and safe to share between threads.
Each :meth:`AssemblerFactory.session` builds a new
:class:`~easysql.compile.builder.QueryAssembler` with its own container and
its own executor, and closes the executor when the block exits::

    factory = AssemblerFactory.from_settings()
    with factory.session() as qa:
        qa.reset("SELECT * FROM item").and_equal("kind", "book")
        rows = qa.execute()

``get_default_factory()`` returns a process-wide factory built from
:func:`~easysql.config.get_settings`.  Only its creation is synchronised;
the assemblers it hands out are never shared.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from easysql.compile.base import SQLDialect
from easysql.compile.builder import QueryAssembler
from easysql.compile.registry import DialectFactory
from easysql.config import Settings, get_settings
from easysql.execute.base import Executor
from easysql.execute.sqlite import SQLiteExecutor

logger = logging.getLogger(__name__)

_SQLITE_SCHEME = "sqlite://"


class AssemblerFactory:
    """Creates assemblers bound to a dialect and a per-session executor.

    Args:
        executor_factory: Zero-argument callable returning a new executor
            for every assembler.
        dialect: Dialect shared by every assembler.  Dialects are stateless
            after construction.
        log_sql: Passed to every assembler.
    """

    def __init__(
        self,
        executor_factory: Callable[[], Executor],
        dialect: SQLDialect,
        *,
        log_sql: bool = False,
    ) -> None:
        self._executor_factory = executor_factory
        self._dialect = dialect
        self._log_sql = log_sql

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> AssemblerFactory:
        """Build a factory from configuration.

        ``sqlite://`` URLs use :class:`~easysql.execute.sqlite.SQLiteExecutor`;
        any other URL is handed to SQLAlchemy, which must be installed.

        Raises:
            ConfigurationError: If no database URL is configured or the
                configured dialect or paramstyle is unknown.
        """
        settings = settings or get_settings()
        url = settings.require_database_url()
        dialect = DialectFactory.create(settings.dialect, settings.paramstyle)

        if url.startswith(_SQLITE_SCHEME):
            def executor_factory() -> Executor:
                return SQLiteExecutor.from_url(url)
        else:
            from easysql.execute.sqlalchemy import SQLAlchemyExecutor

            # one engine (and pool) per factory; sessions must not dispose it
            shared = SQLAlchemyExecutor.from_url(url)

            def executor_factory() -> Executor:
                return SQLAlchemyExecutor(shared.engine)

        logger.info("Assembler factory configured for dialect: %s", dialect.dialect_name)
        return cls(executor_factory, dialect, log_sql=settings.log_sql)

    @property
    def dialect(self) -> SQLDialect:
        return self._dialect

    def create(self) -> QueryAssembler:
        """Return a new assembler; the caller is responsible for closing it."""
        return QueryAssembler(self._executor_factory(), self._dialect, log_sql=self._log_sql)

    @contextmanager
    def session(self) -> Iterator[QueryAssembler]:
        """Yield a new assembler and close it on every exit path."""
        assembler = self.create()
        try:
            yield assembler
        finally:
            assembler.close()


_default_factory: AssemblerFactory | None = None
_default_lock = threading.Lock()


def get_default_factory() -> AssemblerFactory:
    """Return the process-wide factory, creating it from settings on first use."""
    global _default_factory
    if _default_factory is None:
        with _default_lock:
            if _default_factory is None:
                _default_factory = AssemblerFactory.from_settings()
    return _default_factory


def reset_default_factory() -> None:
    """Forget the process-wide factory so the next call rebuilds it."""
    global _default_factory
    with _default_lock:
        _default_factory = None
