"""SQL Server dialect."""

from __future__ import annotations

from easysql.compile.base import SQLDialect


class SQLServerDialect(SQLDialect):
    """Renders T-SQL parameterized SQL.

    Parameter style: ``@name`` – the native T-SQL variable syntax, as used by
    ``sp_executesql`` wrappers.  Pass ``paramstyle="pyformat"`` for
    ``pymssql`` or ``paramstyle="named"`` for SQLAlchemy ``text()``.

    String concatenation uses ``+``.  Quick-search character classes such as
    ``[0-9]`` are only meaningful in T-SQL ``LIKE`` patterns.
    """

    default_paramstyle = "at"

    @property
    def dialect_name(self) -> str:
        return "sqlserver"

    def concat(self, *parts: str) -> str:
        return " + ".join(parts)
