"""PostgreSQL dialect."""

from __future__ import annotations

from easysql.compile.base import SQLDialect


class PostgresDialect(SQLDialect):
    """Renders PostgreSQL-flavoured parameterized SQL.

    Parameter style: ``%(name)s`` – compatible with ``psycopg2`` and
    ``psycopg`` named-parameter execution.  Pass ``paramstyle="named"``
    when statements go through SQLAlchemy ``text()`` instead.
    """

    default_paramstyle = "pyformat"

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def concat(self, *parts: str) -> str:
        return " || ".join(parts)
