"""easysql compilation layer: statement assembly → parameterized SQL."""
from easysql.compile.base import CompiledSQL, SQLDialect
from easysql.compile.builder import QueryAssembler
from easysql.compile.mysql import MySQLDialect
from easysql.compile.pagination import Page, PageRequest
from easysql.compile.postgres import PostgresDialect
from easysql.compile.registry import DialectFactory
from easysql.compile.sqlite import SQLiteDialect
from easysql.compile.sqlserver import SQLServerDialect

__all__ = [
    "CompiledSQL",
    "SQLDialect",
    "QueryAssembler",
    "DialectFactory",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "SQLServerDialect",
    "Page",
    "PageRequest",
]
