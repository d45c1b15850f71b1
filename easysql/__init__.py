"""easySQL – Incremental SQL statement assembly with parameter binding.

Write the SQL. Let the assembler bind it.

Public API
----------
``QueryAssembler``
    Accumulate predicates, ordering and parameters; render and execute the
    resulting statement; page through filtered results.

``AssemblerFactory`` / ``get_default_factory``
    Hand out a fresh assembler per query session.

Re-exported types
-----------------
``StatementContainer``, ``BoundParameter``, ``DbType``, ``SortOrder``,
``CompiledSQL``, ``Page``, ``PageRequest``, ``Settings``, the executor and
row-mapper protocols, and all error classes.

Extensibility
-------------
New dialects can be registered via::

    from easysql.compile.registry import DialectFactory

    @DialectFactory.register("oracle")
    class OracleDialect(SQLDialect):
        ...

After registration, ``Settings(dialect="oracle")`` and
``DialectFactory.create("oracle")`` pick it up automatically.
"""

from __future__ import annotations

from easysql.compile.base import CompiledSQL, SQLDialect
from easysql.compile.builder import QueryAssembler
from easysql.compile.mysql import MySQLDialect
from easysql.compile.pagination import Page, PageRequest
from easysql.compile.postgres import PostgresDialect
from easysql.compile.registry import DialectFactory
from easysql.compile.render import WherePlacement
from easysql.compile.sqlite import SQLiteDialect
from easysql.compile.sqlserver import SQLServerDialect
from easysql.config import Settings, get_settings
from easysql.errors import (
    ConfigurationError,
    DialectError,
    EasySQLError,
    MalformedInputError,
    NoExecutorError,
)
from easysql.execute.base import Executor, ReaderAction, Row, RowMapper
from easysql.execute.mapping import CallableRowMapper, ModelRowMapper
from easysql.execute.sqlite import SQLiteExecutor
from easysql.schema.container import StatementContainer
from easysql.schema.types import BoundParameter, DbType, SortOrder
from easysql.session import AssemblerFactory, get_default_factory

# ---------------------------------------------------------------------------
# Register built-in dialects with DialectFactory
# ---------------------------------------------------------------------------

DialectFactory.register_class("sqlite", SQLiteDialect)
DialectFactory.register_class("postgres", PostgresDialect)
DialectFactory.register_class("mysql", MySQLDialect)
DialectFactory.register_class("sqlserver", SQLServerDialect)

__all__ = [
    # Core
    "QueryAssembler",
    "AssemblerFactory",
    "get_default_factory",
    # State
    "StatementContainer",
    "BoundParameter",
    "DbType",
    "SortOrder",
    # Rendering
    "CompiledSQL",
    "WherePlacement",
    "Page",
    "PageRequest",
    # Dialects
    "SQLDialect",
    "DialectFactory",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "SQLServerDialect",
    # Execution
    "Executor",
    "RowMapper",
    "Row",
    "ReaderAction",
    "SQLiteExecutor",
    "ModelRowMapper",
    "CallableRowMapper",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "EasySQLError",
    "MalformedInputError",
    "ConfigurationError",
    "DialectError",
    "NoExecutorError",
]
